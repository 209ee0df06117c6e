"""Scoring Engine - Pure logic for completion scores.

This engine provides stateless functions that turn a completion attempt into
the HabitLog snapshot to be upserted for (habit, date):
- Boolean completion worth the habit's weight
- Goal-based progress scored proportionally to the goal (capped at weight)
- Strict-mode late penalty: completions after the ideal time earn half,
  floored, never less than 1
- Unmarking, which overwrites the day's record with an empty one

ARCHITECTURE: This is a pure logic engine. It never reads the wall clock; the
caller passes `now` so one logical operation sees one consistent instant.
Scores are non-negative integers and always floored.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const
from ..type_defs import GoalCompletion, HabitLog
from ..utils.dt_utils import as_local, dt_combine_local, dt_date_key
from ..utils.math_utils import floor_score

if TYPE_CHECKING:
    from datetime import tzinfo

    from ..type_defs import Habit


class ScoringEngine:
    """Pure logic engine for completion scoring.

    All methods are static - no instance state.

    Example:
        log = ScoringEngine.complete(habit, "2026-03-02", now)
        log = ScoringEngine.log_progress(habit, "2026-03-02", now, 45)
        log = ScoringEngine.uncomplete(habit, "2026-03-02")
    """

    @staticmethod
    def deadline_for(
        habit: Habit,
        day: str | date | datetime,
        tz: tzinfo | None = None,
    ) -> datetime | None:
        """Return the strict-mode deadline instant for a habit on a day.

        Args:
            habit: Habit with optional ideal_time
            day: Calendar day the completion is for
            tz: Optional timezone override (canonical timezone by default)

        Returns:
            Aware datetime of ideal_time on `day`, or None without ideal_time.
        """
        if habit.ideal_time is None:
            return None
        return dt_combine_local(day, habit.ideal_time, tz)

    @staticmethod
    def is_late(
        habit: Habit,
        day: str | date | datetime,
        now: datetime,
        tz: tzinfo | None = None,
    ) -> bool:
        """Return True if strict mode applies and `now` is past the deadline.

        A completion exactly at the deadline is on time. Naive `now` values are
        read as wall-clock time in the canonical timezone.
        """
        if not habit.strict_mode:
            return False
        deadline = ScoringEngine.deadline_for(habit, day, tz)
        if deadline is None:
            return False
        return as_local(now, tz) > deadline

    @staticmethod
    def apply_strict_penalty(score: int) -> int:
        """Halve a score, floored, with a minimum of 1.

        Examples:
            apply_strict_penalty(10) → 5
            apply_strict_penalty(3) → 1
            apply_strict_penalty(1) → 1
        """
        return floor_score(
            score * const.STRICT_PENALTY_FACTOR,
            minimum=const.STRICT_PENALTY_MIN_SCORE,
        )

    @staticmethod
    def _with_penalty(
        habit: Habit,
        day: str,
        now: datetime,
        score: int,
        tz: tzinfo | None,
    ) -> tuple[int, bool]:
        """Apply the strict-mode rule to a base score."""
        if not ScoringEngine.is_late(habit, day, now, tz):
            return score, False
        penalized = ScoringEngine.apply_strict_penalty(score)
        const.LOGGER.debug(
            "Late completion of habit '%s' on %s: score %d -> %d",
            habit.name,
            day,
            score,
            penalized,
        )
        return penalized, True

    @staticmethod
    def complete(
        habit: Habit,
        day: str | date | datetime,
        now: datetime,
        tz: tzinfo | None = None,
    ) -> HabitLog:
        """Mark a habit as done for a day.

        Args:
            habit: Habit being completed
            day: Calendar day the completion is for
            now: Instant of the completion
            tz: Optional timezone override

        Returns:
            HabitLog to upsert for (habit, day)
        """
        day_key = dt_date_key(day, tz)
        score, penalty = ScoringEngine._with_penalty(
            habit, day_key, now, habit.weight, tz
        )
        return HabitLog(
            habit_id=habit.habit_id,
            date=day_key,
            completed=True,
            completed_at=now,
            score_earned=score,
            penalty_applied=penalty,
        )

    @staticmethod
    def log_progress(
        habit: Habit,
        day: str | date | datetime,
        now: datetime,
        value_logged: float,
        tz: tzinfo | None = None,
    ) -> HabitLog:
        """Record goal progress for a day.

        The habit counts as completed once `value_logged` reaches the goal.
        A completed goal earns weight * min(1, value / goal), floored with a
        minimum of 1, and then the strict-mode rule on top. Below the goal the
        score is 0 and no penalty is evaluated.

        A habit without a positive goal can never be completed this way; the
        value is stored and the log stays uncompleted.

        Args:
            habit: Goal habit
            day: Calendar day the progress is for
            now: Instant of the update
            value_logged: Amount achieved so far (e.g. pages read)
            tz: Optional timezone override

        Returns:
            HabitLog to upsert for (habit, day)
        """
        day_key = dt_date_key(day, tz)
        goal_value = (
            habit.completion.goal_value
            if isinstance(habit.completion, GoalCompletion)
            else None
        )

        if goal_value is None or goal_value <= 0:
            const.LOGGER.warning(
                "Goal progress logged for habit '%s' without a positive goal (%r)",
                habit.name,
                goal_value,
            )
            return HabitLog(
                habit_id=habit.habit_id,
                date=day_key,
                value_logged=value_logged,
            )

        if value_logged < goal_value:
            return HabitLog(
                habit_id=habit.habit_id,
                date=day_key,
                value_logged=value_logged,
            )

        ratio = min(1.0, value_logged / goal_value)
        base_score = floor_score(habit.weight * ratio, minimum=const.GOAL_MIN_SCORE)
        score, penalty = ScoringEngine._with_penalty(habit, day_key, now, base_score, tz)
        return HabitLog(
            habit_id=habit.habit_id,
            date=day_key,
            completed=True,
            completed_at=now,
            score_earned=score,
            penalty_applied=penalty,
            value_logged=value_logged,
        )

    @staticmethod
    def uncomplete(
        habit: Habit,
        day: str | date | datetime,
        tz: tzinfo | None = None,
    ) -> HabitLog:
        """Unmark a habit for a day.

        Returns a full overwrite for the (habit, day) key rather than a
        deletion, so the one-record-per-day invariant holds.
        """
        return HabitLog(habit_id=habit.habit_id, date=dt_date_key(day, tz))
