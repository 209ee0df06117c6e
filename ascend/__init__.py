"""Ascend habit engine.

Recurrence, scoring, streak and aggregation logic for a daily habit tracker.
Storage, authentication and presentation live outside this package; callers
hand in flat habit and log rows (see data_builders) and receive typed results.
"""

from .data_builders import (
    HabitValidationError,
    LogValidationError,
    build_habit,
    build_habits,
    build_log,
    build_logs,
    log_to_record,
)
from .engines import RecurrenceEngine, ScoringEngine, StatisticsEngine, StreakEngine
from .log_book import LogBook
from .type_defs import Habit, HabitLog

__version__ = "0.1.0"

__all__ = [
    "Habit",
    "HabitLog",
    "HabitValidationError",
    "LogBook",
    "LogValidationError",
    "RecurrenceEngine",
    "ScoringEngine",
    "StatisticsEngine",
    "StreakEngine",
    "build_habit",
    "build_habits",
    "build_log",
    "build_logs",
    "log_to_record",
]
