"""Type definitions for Ascend data structures.

ARCHITECTURE DECISION: DATACLASSES FOR MODELS, TypedDict FOR DERIVED VIEWS
===========================================================================

1. **Frozen dataclasses for the engine inputs** (Habit, HabitLog):
   - A habit's recurrence and completion mode are tagged unions. Each variant
     carries exactly the fields it needs (a weekly habit has weekdays, a cycle
     habit has a start date and cycle fields, a goal habit has a goal value),
     so no engine has to guess which optional fields are meaningful.
   - Frozen instances make "mutating a log" an explicit replacement, which is
     the upsert-by-(habit, date) contract of the log store.

2. **TypedDict for the derived views** returned by the statistics engine:
   - Plain dicts serialize directly for charts and API responses.

IMPORTANT: This file must NOT import from engines or data_builders to avoid
circular dependencies. Only import from const.py and standard libraries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Literal, TypedDict

from . import const

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitId = str
ISODate = str  # Calendar day key in the canonical timezone "2026-01-18"
ISOWeek = str  # ISO-8601 week key "2026-W03"
MonthKey = str  # "2026-01"

CycleType = Literal["active", "rest", "pattern"]


# =============================================================================
# Recurrence (tagged union over frequency)
# =============================================================================


@dataclass(frozen=True)
class DailySchedule:
    """Habit applies every day."""

    frequency: Literal["daily"] = field(default=const.FREQUENCY_DAILY, init=False)


@dataclass(frozen=True)
class WeeklySchedule:
    """Habit applies on a fixed set of weekdays.

    Attributes:
        days_of_week: Weekday integers 0-6, 0 = Sunday
    """

    days_of_week: frozenset[int]
    frequency: Literal["weekly"] = field(default=const.FREQUENCY_WEEKLY, init=False)


@dataclass(frozen=True)
class CycleSchedule:
    """Habit recurs on a period counted from a start date.

    Attributes:
        start: First day of the cycle. None means the cycle never applies.
        cycle_type: "active" (every Nth day), "rest" (all but every Nth day)
                    or "pattern" (progressive phases separated by rest days)
        cycle_days: Period length for active/rest cycles
        cycle_pattern: Comma-separated phase lengths for pattern cycles,
                       e.g. "7,9,5"
    """

    start: date | None
    cycle_type: CycleType = const.CYCLE_TYPE_ACTIVE
    cycle_days: int | None = None
    cycle_pattern: str | None = None
    frequency: Literal["cycle"] = field(default=const.FREQUENCY_CYCLE, init=False)


Schedule = DailySchedule | WeeklySchedule | CycleSchedule


# =============================================================================
# Completion mode (tagged union)
# =============================================================================


@dataclass(frozen=True)
class BooleanCompletion:
    """Habit is either done or not done for a day."""


@dataclass(frozen=True)
class GoalCompletion:
    """Habit is scored proportionally against a numeric goal.

    Attributes:
        goal_value: Target amount for one day (e.g. 100 pages)
        goal_unit: Free-text unit for display (e.g. "pages")
    """

    goal_value: float
    goal_unit: str | None = None


Completion = BooleanCompletion | GoalCompletion


# =============================================================================
# Engine inputs
# =============================================================================


@dataclass(frozen=True)
class Habit:
    """A recurring commitment.

    Attributes:
        habit_id: Storage identifier
        name: Display name
        weight: Points awarded for a full completion (positive)
        schedule: Recurrence variant
        completion: Completion mode variant
        ideal_time: Local time of day by which the habit should be done
        strict_mode: Halve the score when completed after ideal_time
        is_active: False once the habit is removed (kept for history)
        is_paused: True while the habit is suspended
    """

    habit_id: HabitId
    name: str
    weight: int = const.DEFAULT_HABIT_WEIGHT
    schedule: Schedule = field(default_factory=DailySchedule)
    completion: Completion = field(default_factory=BooleanCompletion)
    ideal_time: time | None = None
    strict_mode: bool = False
    is_active: bool = True
    is_paused: bool = False

    @property
    def frequency(self) -> str:
        """Frequency identifier derived from the schedule variant."""
        return self.schedule.frequency

    @property
    def is_goal(self) -> bool:
        """True when the habit uses proportional goal scoring."""
        return isinstance(self.completion, GoalCompletion)

    @property
    def is_enabled(self) -> bool:
        """True when the habit takes part in applicability and streaks."""
        return self.is_active and not self.is_paused


@dataclass(frozen=True)
class HabitLog:
    """Completion state of one habit on one calendar day.

    At most one log exists per (habit_id, date); writing a new one replaces
    the previous record for that key.
    """

    habit_id: HabitId
    date: ISODate
    completed: bool = False
    completed_at: datetime | None = None
    score_earned: int = 0
    penalty_applied: bool = False
    value_logged: float | None = None

    @property
    def key(self) -> tuple[HabitId, ISODate]:
        """Upsert key of this record."""
        return (self.habit_id, self.date)


# =============================================================================
# Derived views (statistics engine outputs)
# =============================================================================


class DailyScore(TypedDict):
    """Total completed score of one day."""

    date: ISODate
    score: int


class WeeklyScore(TypedDict):
    """Total completed score of one ISO week."""

    week: ISOWeek
    score: int


class MonthlyScore(TypedDict):
    """Monthly score with the number of active days and the per-day average."""

    month: MonthKey
    score: int
    days: int
    avg: float


class HabitCompletionRate(TypedDict):
    """Completion table row for one habit over a log window."""

    habit: Habit
    completed_days: int
    total_days: int
    percent: int
    total_score: int


class HabitStreakInfo(TypedDict):
    """Current and longest streak of one habit."""

    current: int
    longest: int


class ScoreSummary(TypedDict):
    """Headline numbers for a dashboard."""

    total_all_time: int
    avg_daily: float
    best_day: int
    weekly_total: int
    monthly_total: int
    active_days: int


class AlignmentLabel(TypedDict):
    """Human label for an alignment percentage."""

    label: str
    emoji: str


class PeriodKeys(TypedDict):
    """Period identifiers of one calendar day."""

    daily: ISODate
    weekly: ISOWeek
    monthly: MonthKey
    yearly: str
