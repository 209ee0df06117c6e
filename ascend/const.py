# File: const.py
"""Constants for the Ascend habit engine.

This file centralizes record keys, frequency and cycle identifiers, scoring
and streak defaults, and reporting thresholds so that every engine reads the
same values.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------

# Logger
LOGGER = logging.getLogger(__package__)

# Canonical timezone for "today", log dates and strict-mode deadlines (UTC-3).
# NOTE: POSIX "Etc/GMT+3" is UTC-3, the sign is inverted by convention.
DEFAULT_TIME_ZONE_NAME: Final = "Etc/GMT+3"

# ------------------------------------------------------------------------------------------------
# Frequencies
# ------------------------------------------------------------------------------------------------
FREQUENCY_DAILY: Final = "daily"
FREQUENCY_WEEKLY: Final = "weekly"
FREQUENCY_CYCLE: Final = "cycle"

FREQUENCY_OPTIONS: Final = (FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_CYCLE)

# Only these frequencies take part in the global streak and the reset rule
STREAK_FREQUENCIES: Final = frozenset({FREQUENCY_DAILY, FREQUENCY_WEEKLY})

# Cycle types
CYCLE_TYPE_ACTIVE: Final = "active"
CYCLE_TYPE_REST: Final = "rest"
CYCLE_TYPE_PATTERN: Final = "pattern"

CYCLE_TYPE_OPTIONS: Final = (CYCLE_TYPE_ACTIVE, CYCLE_TYPE_REST, CYCLE_TYPE_PATTERN)

CYCLE_PATTERN_SEPARATOR: Final = ","

# Weekdays (0 = Sunday)
WEEKDAY_SUNDAY: Final = 0
WEEKDAY_SATURDAY: Final = 6

# ------------------------------------------------------------------------------------------------
# Habit record keys (flat storage rows)
# ------------------------------------------------------------------------------------------------
DATA_HABIT_ID: Final = "id"
DATA_HABIT_NAME: Final = "name"
DATA_HABIT_WEIGHT: Final = "weight"
DATA_HABIT_FREQUENCY: Final = "frequency"
DATA_HABIT_DAYS_OF_WEEK: Final = "days_of_week"
DATA_HABIT_IDEAL_TIME: Final = "ideal_time"
DATA_HABIT_STRICT_MODE: Final = "strict_mode"
DATA_HABIT_GOAL_VALUE: Final = "goal_value"
DATA_HABIT_GOAL_UNIT: Final = "goal_unit"
DATA_HABIT_CYCLE_START: Final = "cycle_start"
DATA_HABIT_CYCLE_TYPE: Final = "cycle_type"
DATA_HABIT_CYCLE_DAYS: Final = "cycle_days"
DATA_HABIT_CYCLE_PATTERN: Final = "cycle_pattern"
DATA_HABIT_IS_ACTIVE: Final = "is_active"
DATA_HABIT_IS_PAUSED: Final = "is_paused"

# ------------------------------------------------------------------------------------------------
# Log record keys
# ------------------------------------------------------------------------------------------------
DATA_LOG_HABIT_ID: Final = "habit_id"
DATA_LOG_DATE: Final = "date"
DATA_LOG_COMPLETED: Final = "completed"
DATA_LOG_COMPLETED_AT: Final = "completed_at"
DATA_LOG_SCORE_EARNED: Final = "score_earned"
DATA_LOG_PENALTY_APPLIED: Final = "penalty_applied"
DATA_LOG_VALUE_LOGGED: Final = "value_logged"

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_HABIT_WEIGHT: Final = 1
DEFAULT_HABIT_FREQUENCY: Final = FREQUENCY_DAILY
DEFAULT_CYCLE_TYPE: Final = CYCLE_TYPE_ACTIVE

# ------------------------------------------------------------------------------------------------
# Scoring
# ------------------------------------------------------------------------------------------------
STRICT_PENALTY_FACTOR: Final = 0.5
STRICT_PENALTY_MIN_SCORE: Final = 1
GOAL_MIN_SCORE: Final = 1

# ------------------------------------------------------------------------------------------------
# Streaks
# ------------------------------------------------------------------------------------------------
STRICT_RESET_WINDOW_DAYS: Final = 3
STRICT_RESET_FAIL_THRESHOLD: Final = 3

# ------------------------------------------------------------------------------------------------
# Periods
# ------------------------------------------------------------------------------------------------
PERIOD_DAILY: Final = "daily"
PERIOD_WEEKLY: Final = "weekly"
PERIOD_MONTHLY: Final = "monthly"
PERIOD_YEARLY: Final = "yearly"

# ------------------------------------------------------------------------------------------------
# Reporting
# ------------------------------------------------------------------------------------------------
AVERAGE_PRECISION: Final = 1

# Upper ratio bounds for heatmap levels 1..3; anything above is level 4
HEATMAP_LEVEL_THRESHOLDS: Final = (0.25, 0.5, 0.75)
HEATMAP_MAX_LEVEL: Final = 4

# (minimum percent, label, emoji), checked in order
ALIGNMENT_LABELS: Final = (
    (90, "Elite mode", "🔥"),
    (75, "High consistency", "💪"),
    (60, "Evolving", "📈"),
    (40, "Building the base", "🧱"),
    (20, "Start of the journey", "🌱"),
)
ALIGNMENT_LABEL_DEFAULT: Final = ("Not started yet", "⚡")
