"""Recurrence Engine for Ascend.

Decides whether a habit applies on a calendar day:
- daily: every day
- weekly: on a fixed set of weekdays (0 = Sunday)
- cycle/active: every Nth day counted from the cycle start
- cycle/rest: every day except every Nth day
- cycle/pattern: progressive active phases, each followed by one rest day

Malformed cycle configuration degrades instead of raising: a missing start
date or cycle length makes the habit never applicable, and a pattern with no
usable phase behaves like a daily habit.

IMPORTANT: This module must NOT import from other engines.
Only import from const.py, type_defs.py, and utils.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const
from ..type_defs import CycleSchedule, DailySchedule, WeeklySchedule
from ..utils.dt_utils import (
    dt_date_key,
    dt_date_range,
    dt_day_of_week,
    dt_days_between,
)

if TYPE_CHECKING:
    from ..type_defs import Habit, ISODate

DayLike = str | date | datetime


def parse_cycle_pattern(pattern: str | None) -> list[int]:
    """Parse a comma-separated phase list into positive phase lengths.

    Non-positive and unparsable entries are dropped; zero-length phases are
    not valid phases.

    Examples:
        parse_cycle_pattern("7,9,5") → [7, 9, 5]
        parse_cycle_pattern("3, x, 0, -2, 4") → [3, 4]
        parse_cycle_pattern(None) → []
    """
    if not pattern:
        return []

    phases: list[int] = []
    for raw in str(pattern).split(const.CYCLE_PATTERN_SEPARATOR):
        raw = raw.strip()
        try:
            length = int(raw)
        except ValueError:
            continue
        if length > 0:
            phases.append(length)
    return phases


def pattern_applies(phases: list[int], offset: int) -> bool:
    """Return True if `offset` days into a progressive pattern is an active day.

    Each phase of n active days is followed by exactly one rest day, so one
    full cycle lasts sum(n + 1) days. An empty phase list applies every day.

    Example (phases [7, 9, 5], 24-day cycle):
        offsets 0-6 active, 7 rest, 8-16 active, 17 rest, 18-22 active, 23 rest
    """
    if not phases:
        return True

    total_cycle = sum(length + 1 for length in phases)
    position = offset % total_cycle

    accum = 0
    for length in phases:
        accum += length
        if position == accum:
            return False
        accum += 1
        if position < accum:
            return True
    return False


class RecurrenceEngine:
    """Applicability calculator for a single habit.

    Holds the habit's schedule and answers "does it apply on this day?" for
    any calendar day. Pure: no state changes after construction.

    Example:
        engine = RecurrenceEngine(habit)
        engine.applies_on("2026-03-02")
        engine.applicable_dates("2026-03-01", "2026-03-31")
    """

    def __init__(self, habit: Habit) -> None:
        """Initialize the engine for one habit.

        Args:
            habit: Habit whose schedule is evaluated
        """
        self._habit = habit
        self._schedule = habit.schedule

        # Parse the pattern once; reused for every evaluated day
        self._phases: list[int] = []
        if (
            isinstance(self._schedule, CycleSchedule)
            and self._schedule.cycle_type == const.CYCLE_TYPE_PATTERN
        ):
            self._phases = parse_cycle_pattern(self._schedule.cycle_pattern)
            if not self._phases:
                const.LOGGER.warning(
                    "Habit '%s' has no usable cycle pattern (%r); treating as daily",
                    habit.name,
                    self._schedule.cycle_pattern,
                )

    def applies_on(self, day: DayLike) -> bool:
        """Return True if the habit's schedule includes `day`.

        Active/paused state is not checked here; see habits_for_date().
        """
        schedule = self._schedule

        if isinstance(schedule, DailySchedule):
            return True

        if isinstance(schedule, WeeklySchedule):
            return dt_day_of_week(day) in schedule.days_of_week

        if isinstance(schedule, CycleSchedule):
            return self._cycle_applies(schedule, day)

        return False

    def applicable_dates(self, start: DayLike, end: DayLike) -> list[ISODate]:
        """Return the days in [start, end] on which the habit applies."""
        return [day for day in dt_date_range(start, end) if self.applies_on(day)]

    def _cycle_applies(self, schedule: CycleSchedule, day: DayLike) -> bool:
        """Evaluate a cycle schedule for one day."""
        if schedule.start is None:
            return False

        diff = dt_days_between(schedule.start, day)
        if diff < 0:
            # Cycle has not started yet
            return False

        if schedule.cycle_type == const.CYCLE_TYPE_PATTERN:
            return pattern_applies(self._phases, diff)

        if schedule.cycle_type not in (const.CYCLE_TYPE_ACTIVE, const.CYCLE_TYPE_REST):
            return False

        cycle_days = schedule.cycle_days
        if not cycle_days or cycle_days <= 0:
            return False

        on_cycle_day = diff % cycle_days == 0
        if schedule.cycle_type == const.CYCLE_TYPE_ACTIVE:
            return on_cycle_day
        return not on_cycle_day


# =============================================================================
# Module-level helpers
# =============================================================================


def applies_on(habit: Habit, day: DayLike) -> bool:
    """Return True if `habit`'s schedule includes `day`."""
    return RecurrenceEngine(habit).applies_on(day)


def applicable_dates(habit: Habit, start: DayLike, end: DayLike) -> list[ISODate]:
    """Return the days in [start, end] on which `habit` applies."""
    return RecurrenceEngine(habit).applicable_dates(start, end)


def habits_for_date(habits: Iterable[Habit], day: DayLike) -> list[Habit]:
    """Return the active, unpaused habits that apply on `day`, in input order."""
    day_key = dt_date_key(day)
    return [
        habit
        for habit in habits
        if habit.is_enabled and RecurrenceEngine(habit).applies_on(day_key)
    ]


def applies_for_streak(habit: Habit, day: DayLike) -> bool:
    """Return True if `habit` counts toward the global streak on `day`.

    Only enabled daily and weekly habits take part; cycle habits never do.
    """
    if not habit.is_enabled:
        return False
    if habit.frequency not in const.STREAK_FREQUENCIES:
        return False
    return RecurrenceEngine(habit).applies_on(day)


def streak_habits_for_date(habits: Iterable[Habit], day: DayLike) -> list[Habit]:
    """Return the habits that count toward the global streak on `day`."""
    day_key = dt_date_key(day)
    return [habit for habit in habits if applies_for_streak(habit, day_key)]
