"""Streak Engine - Per-habit and global streaks from a log history.

Streak rules:
    - Habit streak: consecutive completed days of one habit, counted back
      from the most recent completion, which must be today or yesterday.
    - Longest habit streak: the longest run of consecutive completed days
      anywhere in the history.
    - Global streak: consecutive logged days, back from today or yesterday,
      on which every applicable daily/weekly habit was completed. A day with
      no applicable habit is satisfied vacuously and still extends the streak.
    - Strict-mode reset: if each of the 3 days before today had an unmet
      applicable habit, the global streak is forced to 0.

Design Principles:
    - Stateless: every call recomputes from the full history passed in
    - Explicit "today": pass reference_date for deterministic results;
      defaults to today in the canonical timezone
    - Log dates are canonical "YYYY-MM-DD" keys; one record per (habit, day)
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_resolve_today, dt_shift_days
from .recurrence_engine import streak_habits_for_date

if TYPE_CHECKING:
    from datetime import tzinfo

    from ..type_defs import Habit, HabitId, HabitLog, HabitStreakInfo, ISODate

ReferenceDate = str | date | datetime | None


def _completed_by_date(logs: Iterable[HabitLog]) -> dict[ISODate, set[HabitId]]:
    """Map each date to the ids of habits completed that day."""
    completed: dict[ISODate, set[HabitId]] = defaultdict(set)
    for log in logs:
        if log.completed:
            completed[log.date].add(log.habit_id)
    return completed


def _all_met(habits: list[Habit], completed_ids: set[HabitId]) -> bool:
    """Return True if every habit in `habits` has a completed log."""
    return all(habit.habit_id in completed_ids for habit in habits)


class StreakEngine:
    """Stateless streak calculator.

    Example:
        StreakEngine.habit_streak("h1", logs, reference_date="2026-03-02")
        StreakEngine.global_streak(logs, habits, reference_date="2026-03-02")
    """

    @staticmethod
    def _today_and_yesterday(
        reference_date: ReferenceDate, tz: tzinfo | None
    ) -> tuple[ISODate, ISODate]:
        today = dt_resolve_today(reference_date, tz).isoformat()
        return today, dt_shift_days(today, -1)

    @staticmethod
    def habit_streak(
        habit_id: HabitId,
        logs: Iterable[HabitLog],
        reference_date: ReferenceDate = None,
        tz: tzinfo | None = None,
    ) -> int:
        """Return the current streak of one habit.

        Args:
            habit_id: Habit to evaluate
            logs: Full log history (any order, any habits)
            reference_date: "Today". Defaults to today in the canonical timezone.
            tz: Optional timezone override

        Returns:
            Number of consecutive completed days ending today or yesterday,
            0 if the latest completion is older than yesterday.

        Example:
            completed on [today, yesterday, today-3] → 2
        """
        dates = sorted(
            {log.date for log in logs if log.habit_id == habit_id and log.completed},
            reverse=True,
        )
        if not dates:
            return 0

        today, yesterday = StreakEngine._today_and_yesterday(reference_date, tz)
        if dates[0] not in (today, yesterday):
            const.LOGGER.debug(
                "Habit '%s' streak broken: last completion %s", habit_id, dates[0]
            )
            return 0

        streak = 0
        expected = dates[0]
        for day in dates:
            if day != expected:
                break
            streak += 1
            expected = dt_shift_days(expected, -1)
        return streak

    @staticmethod
    def longest_habit_streak(habit_id: HabitId, logs: Iterable[HabitLog]) -> int:
        """Return the longest run of consecutive completed days of one habit.

        Returns:
            0 without completions, otherwise at least 1.
        """
        dates = sorted(
            {log.date for log in logs if log.habit_id == habit_id and log.completed}
        )
        if not dates:
            return 0

        longest = current = 1
        for previous, day in zip(dates, dates[1:]):
            if dt_shift_days(previous, 1) == day:
                current += 1
                longest = max(longest, current)
            else:
                current = 1
        return longest

    @staticmethod
    def global_streak(
        logs: Iterable[HabitLog],
        habits: Iterable[Habit],
        reference_date: ReferenceDate = None,
        tz: tzinfo | None = None,
    ) -> int:
        """Return the number of consecutive days all applicable habits were met.

        Walks back over the dates present in the log set, starting from the
        most recent one (which must be today or yesterday). The walk stops at
        the first date that is not exactly one day before the previous one,
        or that has an applicable daily/weekly habit without a completed log.

        Args:
            logs: Full log history
            habits: Active habits (paused/removed ones are ignored)
            reference_date: "Today". Defaults to today in the canonical timezone.
            tz: Optional timezone override

        Returns:
            Global streak in days; 0 without habits or logs.
        """
        habit_list = list(habits)
        if not habit_list:
            return 0

        log_list = list(logs)
        dates = sorted({log.date for log in log_list}, reverse=True)
        if not dates:
            return 0

        today, yesterday = StreakEngine._today_and_yesterday(reference_date, tz)
        if dates[0] not in (today, yesterday):
            const.LOGGER.debug("Global streak broken: last log %s", dates[0])
            return 0

        completed = _completed_by_date(log_list)
        streak = 0
        expected = dates[0]
        for day in dates:
            if day != expected:
                break
            applicable = streak_habits_for_date(habit_list, day)
            if applicable and not _all_met(applicable, completed.get(day, set())):
                break
            streak += 1
            expected = dt_shift_days(expected, -1)
        return streak

    @staticmethod
    def strict_mode_reset_check(
        logs: Iterable[HabitLog],
        habits: Iterable[Habit],
        reference_date: ReferenceDate = None,
        tz: tzinfo | None = None,
    ) -> bool:
        """Return True if the 3-day failure rule forces the streak to 0.

        Inspects the STRICT_RESET_WINDOW_DAYS days immediately before today.
        A day fails when at least one applicable daily/weekly habit has no
        completed log; days without applicable habits are not failures.
        """
        habit_list = list(habits)
        completed = _completed_by_date(logs)
        today = dt_resolve_today(reference_date, tz).isoformat()

        failed_days = 0
        for offset in range(1, const.STRICT_RESET_WINDOW_DAYS + 1):
            day = dt_shift_days(today, -offset)
            applicable = streak_habits_for_date(habit_list, day)
            if not applicable:
                continue
            if not _all_met(applicable, completed.get(day, set())):
                failed_days += 1

        triggered = failed_days >= const.STRICT_RESET_FAIL_THRESHOLD
        if triggered:
            const.LOGGER.debug(
                "Strict-mode reset: %d failed days before %s", failed_days, today
            )
        return triggered

    @staticmethod
    def effective_global_streak(
        logs: Iterable[HabitLog],
        habits: Iterable[Habit],
        reference_date: ReferenceDate = None,
        tz: tzinfo | None = None,
    ) -> int:
        """Return the global streak with the strict-mode reset rule applied."""
        log_list = list(logs)
        habit_list = list(habits)
        if StreakEngine.strict_mode_reset_check(
            log_list, habit_list, reference_date, tz
        ):
            return 0
        return StreakEngine.global_streak(log_list, habit_list, reference_date, tz)

    @staticmethod
    def habit_streaks(
        habits: Iterable[Habit],
        logs: Iterable[HabitLog],
        reference_date: ReferenceDate = None,
        tz: tzinfo | None = None,
    ) -> dict[HabitId, HabitStreakInfo]:
        """Return current and longest streak for each habit."""
        log_list = list(logs)
        return {
            habit.habit_id: {
                "current": StreakEngine.habit_streak(
                    habit.habit_id, log_list, reference_date, tz
                ),
                "longest": StreakEngine.longest_habit_streak(habit.habit_id, log_list),
            }
            for habit in habits
        }
