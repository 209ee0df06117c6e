"""Statistics Engine - Score series, completion tables and alignment.

This engine folds raw habit logs into the derived views used by dashboards:
- Daily / ISO-weekly / monthly score series
- Per-habit completion-rate table and the overall alignment percentage
- Day-level helpers (earned vs. maximum score, completion percent)
- Score and completion maps, heatmap intensity levels, summary numbers

Design Principles:
    - Stateless: No stored data, operates on passed logs and habits
    - Consistent: Period keys come from dt_utils (canonical calendar)
    - Only completed logs contribute to score series
    - Percentages and averages are rounded half-up
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import (
    dt_iso_week_key,
    dt_month_key,
    dt_resolve_today,
    dt_year_key,
)
from ..utils.math_utils import calculate_percentage, mean, round_half_up

if TYPE_CHECKING:
    from datetime import tzinfo

    from ..type_defs import (
        AlignmentLabel,
        DailyScore,
        Habit,
        HabitCompletionRate,
        HabitId,
        HabitLog,
        ISODate,
        MonthlyScore,
        PeriodKeys,
        ScoreSummary,
        WeeklyScore,
    )


class StatisticsEngine:
    """Unified engine for log aggregation.

    This class provides methods to:
    - Aggregate completed scores per day, ISO week and month
    - Build per-habit completion rates and the alignment percentage
    - Produce dashboard helpers (summary, score map, heatmap levels)

    All methods are stateless - they operate on data passed as arguments.
    The engine does NOT persist data.

    Example:
        stats = StatisticsEngine()
        daily = stats.aggregate_by_day(logs)
        monthly = stats.aggregate_by_month(logs)
        alignment = stats.alignment_percent(habits, last_30_days_logs)
    """

    # ────────────────────────────────────────────────────────────────
    # Period Keys
    # ────────────────────────────────────────────────────────────────

    def get_period_keys(
        self,
        reference_date: str | date | datetime | None = None,
        tz: tzinfo | None = None,
    ) -> PeriodKeys:
        """Generate period keys for all time granularities.

        Args:
            reference_date: Day to generate keys for. Defaults to today
                            in the canonical timezone.
            tz: Optional timezone override

        Returns:
            Dictionary with keys: "daily", "weekly", "monthly", "yearly"

        Example:
            >>> stats.get_period_keys("2026-01-19")
            {
                "daily": "2026-01-19",
                "weekly": "2026-W04",
                "monthly": "2026-01",
                "yearly": "2026"
            }
        """
        ref = dt_resolve_today(reference_date, tz)
        return {
            const.PERIOD_DAILY: ref.isoformat(),
            const.PERIOD_WEEKLY: dt_iso_week_key(ref),
            const.PERIOD_MONTHLY: dt_month_key(ref),
            const.PERIOD_YEARLY: dt_year_key(ref),
        }

    # ────────────────────────────────────────────────────────────────
    # Score Series
    # ────────────────────────────────────────────────────────────────

    def aggregate_by_day(self, logs: Iterable[HabitLog]) -> list[DailyScore]:
        """Sum completed scores per date, ascending by date."""
        totals: dict[ISODate, int] = defaultdict(int)
        for log in logs:
            if log.completed:
                totals[log.date] += log.score_earned
        return [{"date": day, "score": totals[day]} for day in sorted(totals)]

    def aggregate_by_week(self, logs: Iterable[HabitLog]) -> list[WeeklyScore]:
        """Sum completed scores per ISO-8601 week ("YYYY-Www"), ascending."""
        totals: dict[str, int] = defaultdict(int)
        for log in logs:
            if log.completed:
                totals[dt_iso_week_key(log.date)] += log.score_earned
        return [{"week": week, "score": totals[week]} for week in sorted(totals)]

    def aggregate_by_month(self, logs: Iterable[HabitLog]) -> list[MonthlyScore]:
        """Sum completed scores per month with active days and daily average.

        `days` counts distinct dates with a completed log in the month and
        `avg` is score / days rounded half-up to one decimal.

        Example:
            logs {2024-01-01: 5, 2024-01-02: 5}
            → [{"month": "2024-01", "score": 10, "days": 2, "avg": 5.0}]
        """
        totals: dict[str, int] = defaultdict(int)
        active_days: dict[str, set[ISODate]] = defaultdict(set)
        for log in logs:
            if not log.completed:
                continue
            month = dt_month_key(log.date)
            totals[month] += log.score_earned
            active_days[month].add(log.date)

        result: list[MonthlyScore] = []
        for month in sorted(totals):
            days = len(active_days[month])
            result.append(
                {
                    "month": month,
                    "score": totals[month],
                    "days": days,
                    "avg": round_half_up(totals[month] / days, const.AVERAGE_PRECISION),
                }
            )
        return result

    # ────────────────────────────────────────────────────────────────
    # Completion Rates
    # ────────────────────────────────────────────────────────────────

    def habit_completion_rates(
        self,
        habits: Iterable[Habit],
        logs: Iterable[HabitLog],
    ) -> list[HabitCompletionRate]:
        """Build the completion table, one row per habit in input order.

        `total_days` counts every log row of the habit in the supplied set
        (completed or not); `percent` is completed / total, half-up rounded,
        0 when the habit has no rows.
        """
        by_habit: dict[HabitId, list[HabitLog]] = defaultdict(list)
        for log in logs:
            by_habit[log.habit_id].append(log)

        result: list[HabitCompletionRate] = []
        for habit in habits:
            habit_logs = by_habit.get(habit.habit_id, [])
            total_days = len(habit_logs)
            completed_days = sum(1 for log in habit_logs if log.completed)
            result.append(
                {
                    "habit": habit,
                    "completed_days": completed_days,
                    "total_days": total_days,
                    "percent": calculate_percentage(completed_days, total_days),
                    "total_score": sum(log.score_earned for log in habit_logs),
                }
            )
        return result

    def alignment_percent(
        self,
        habits: Iterable[Habit],
        logs: Iterable[HabitLog],
    ) -> int:
        """Return the unweighted mean completion percent across habits (0-100).

        Returns 0 when there are no habits or no logs.
        """
        habit_list = list(habits)
        log_list = list(logs)
        if not habit_list or not log_list:
            return 0
        rates = self.habit_completion_rates(habit_list, log_list)
        return int(round_half_up(mean([rate["percent"] for rate in rates])))

    # ────────────────────────────────────────────────────────────────
    # Day Helpers
    # ────────────────────────────────────────────────────────────────

    def daily_score(self, logs: Iterable[HabitLog]) -> int:
        """Return the completed score of one day's logs."""
        return sum(log.score_earned for log in logs if log.completed)

    def max_daily_score(self, habits: Iterable[Habit]) -> int:
        """Return the best possible score for a set of applicable habits."""
        return sum(habit.weight for habit in habits)

    def daily_percent(self, logs: Iterable[HabitLog], habits: Iterable[Habit]) -> int:
        """Return earned / maximum score of a day as a percentage.

        Args:
            logs: Logs of the day
            habits: Habits applicable that day

        Returns:
            Half-up rounded percentage, 0 when no score is possible.
        """
        return calculate_percentage(self.daily_score(logs), self.max_daily_score(habits))

    # ────────────────────────────────────────────────────────────────
    # Maps and Dashboard Helpers
    # ────────────────────────────────────────────────────────────────

    def build_score_map(self, logs: Iterable[HabitLog]) -> dict[ISODate, int]:
        """Return {date: completed score} for heatmaps."""
        return {entry["date"]: entry["score"] for entry in self.aggregate_by_day(logs)}

    def build_completion_map(
        self, logs: Iterable[HabitLog]
    ) -> dict[HabitId, dict[ISODate, bool]]:
        """Return {habit_id: {date: completed}} for every log row."""
        result: dict[HabitId, dict[ISODate, bool]] = defaultdict(dict)
        for log in logs:
            result[log.habit_id][log.date] = log.completed
        return dict(result)

    def heatmap_level(self, score: int, max_score: int) -> int:
        """Return the heatmap intensity level (0-4) of a day's score.

        Examples:
            heatmap_level(0, 20) → 0
            heatmap_level(5, 20) → 1
            heatmap_level(11, 20) → 3
            heatmap_level(20, 20) → 4
        """
        if not score or max_score <= 0:
            return 0
        ratio = score / max_score
        for level, upper_bound in enumerate(const.HEATMAP_LEVEL_THRESHOLDS, start=1):
            if ratio <= upper_bound:
                return level
        return const.HEATMAP_MAX_LEVEL

    def alignment_label(self, percent: int) -> AlignmentLabel:
        """Return the label and emoji describing an alignment percentage."""
        for minimum, label, emoji in const.ALIGNMENT_LABELS:
            if percent >= minimum:
                return {"label": label, "emoji": emoji}
        label, emoji = const.ALIGNMENT_LABEL_DEFAULT
        return {"label": label, "emoji": emoji}

    def summarize(
        self,
        daily: Sequence[DailyScore],
        weekly: Sequence[WeeklyScore],
        monthly: Sequence[MonthlyScore],
    ) -> ScoreSummary:
        """Compute headline numbers from already aggregated series.

        Only days with a positive score count as active. Weekly and monthly
        totals are those of the latest period in each series.
        """
        scores = [entry["score"] for entry in daily if entry["score"] > 0]
        total = sum(scores)
        return {
            "total_all_time": total,
            "avg_daily": (
                round_half_up(total / len(scores), const.AVERAGE_PRECISION)
                if scores
                else 0.0
            ),
            "best_day": max(scores, default=0),
            "weekly_total": weekly[-1]["score"] if weekly else 0,
            "monthly_total": monthly[-1]["score"] if monthly else 0,
            "active_days": len(scores),
        }
