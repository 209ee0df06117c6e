"""Pure logic engines for Ascend.

Engines are stateless: they operate on the habits and logs passed to them and
never touch storage or the wall clock unless no reference date is supplied.

Engines:
    - RecurrenceEngine: Does a habit apply on a given day
    - ScoringEngine: Completion, goal progress and strict-mode penalty
    - StreakEngine: Per-habit, longest and global streaks
    - StatisticsEngine: Score series, completion rates and alignment
"""

from .recurrence_engine import (
    RecurrenceEngine,
    applicable_dates,
    applies_for_streak,
    applies_on,
    habits_for_date,
    parse_cycle_pattern,
)
from .scoring_engine import ScoringEngine
from .statistics_engine import StatisticsEngine
from .streak_engine import StreakEngine

__all__ = [
    "RecurrenceEngine",
    "ScoringEngine",
    "StatisticsEngine",
    "StreakEngine",
    "applicable_dates",
    "applies_for_streak",
    "applies_on",
    "habits_for_date",
    "parse_cycle_pattern",
]
