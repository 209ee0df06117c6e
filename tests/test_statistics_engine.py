"""Tests for StatisticsEngine.

Tests cover:
- Period key generation (daily, weekly, monthly, yearly formats)
- Daily, ISO-weekly and monthly score series
- Completion-rate table and alignment percentage
- Day helpers (daily score, max score, percent)
- Score/completion maps, heatmap levels, alignment labels, summary
"""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from ascend import const
from ascend.engines.statistics_engine import StatisticsEngine
from ascend.type_defs import Habit, HabitLog


@pytest.fixture
def stats() -> StatisticsEngine:
    """Return a StatisticsEngine instance."""
    return StatisticsEngine()


def make_habit(habit_id: str, weight: int = 1) -> Habit:
    """Create a daily habit."""
    return Habit(habit_id=habit_id, name=habit_id.title(), weight=weight)


def make_log(
    habit_id: str, date_key: str, score: int = 1, completed: bool = True
) -> HabitLog:
    """Create a log row."""
    return HabitLog(
        habit_id=habit_id,
        date=date_key,
        completed=completed,
        score_earned=score,
    )


class TestGetPeriodKeys:
    """Tests for get_period_keys method."""

    def test_all_formats(self, stats: StatisticsEngine) -> None:
        """Keys for every granularity."""
        keys = stats.get_period_keys(reference_date=date(2026, 1, 19))

        assert keys == {
            const.PERIOD_DAILY: "2026-01-19",
            const.PERIOD_WEEKLY: "2026-W04",
            const.PERIOD_MONTHLY: "2026-01",
            const.PERIOD_YEARLY: "2026",
        }

    def test_accepts_date_key(
        self, stats: StatisticsEngine, reference_date: str
    ) -> None:
        """A "YYYY-MM-DD" key is accepted as the reference."""
        keys = stats.get_period_keys(reference_date)

        assert keys[const.PERIOD_DAILY] == reference_date
        assert keys[const.PERIOD_WEEKLY] == "2026-W10"

    def test_accepts_aware_datetime(self, stats: StatisticsEngine) -> None:
        """Instants are mapped to the canonical day first."""
        keys = stats.get_period_keys(datetime(2026, 1, 1, 1, 0, tzinfo=UTC))

        assert keys[const.PERIOD_DAILY] == "2025-12-31"
        assert keys[const.PERIOD_WEEKLY] == "2026-W01"
        assert keys[const.PERIOD_YEARLY] == "2025"


class TestScoreSeries:
    """Tests for aggregate_by_day / _week / _month."""

    def test_by_day_sums_completed_only(self, stats: StatisticsEngine) -> None:
        """Uncompleted logs never contribute."""
        logs = [
            make_log("a", "2026-03-02", 3),
            make_log("b", "2026-03-01", 2),
            make_log("c", "2026-03-02", 5),
            make_log("d", "2026-03-02", 4, completed=False),
        ]

        assert stats.aggregate_by_day(logs) == [
            {"date": "2026-03-01", "score": 2},
            {"date": "2026-03-02", "score": 8},
        ]

    def test_by_day_omits_days_without_completions(
        self, stats: StatisticsEngine
    ) -> None:
        """A day with only uncompleted logs does not appear."""
        logs = [make_log("a", "2026-03-02", 0, completed=False)]
        assert stats.aggregate_by_day(logs) == []

    def test_by_week_iso_keys(self, stats: StatisticsEngine) -> None:
        """Sunday closes the Monday week; year boundaries follow ISO."""
        logs = [
            make_log("a", "2026-03-01", 1),  # Sunday, W09
            make_log("a", "2026-03-02", 2),  # Monday, W10
            make_log("a", "2026-03-08", 3),  # Sunday, W10
            make_log("a", "2024-12-30", 4),  # 2025-W01
        ]

        assert stats.aggregate_by_week(logs) == [
            {"week": "2025-W01", "score": 4},
            {"week": "2026-W09", "score": 1},
            {"week": "2026-W10", "score": 5},
        ]

    def test_by_month_two_days(self, stats: StatisticsEngine) -> None:
        """{2024-01-01: 5, 2024-01-02: 5} gives score 10 over 2 days, avg 5.0."""
        logs = [make_log("a", "2024-01-01", 5), make_log("a", "2024-01-02", 5)]

        assert stats.aggregate_by_month(logs) == [
            {"month": "2024-01", "score": 10, "days": 2, "avg": 5.0}
        ]

    def test_by_month_counts_distinct_days(self, stats: StatisticsEngine) -> None:
        """Several habits on one day count as one active day."""
        logs = [
            make_log("a", "2024-02-10", 3),
            make_log("b", "2024-02-10", 4),
            make_log("a", "2024-02-11", 3),
            make_log("a", "2024-02-12", 9, completed=False),
            make_log("a", "2024-03-01", 1),
        ]

        assert stats.aggregate_by_month(logs) == [
            {"month": "2024-02", "score": 10, "days": 2, "avg": 5.0},
            {"month": "2024-03", "score": 1, "days": 1, "avg": 1.0},
        ]

    def test_by_month_average_half_up(self, stats: StatisticsEngine) -> None:
        """Averages round half-up to one decimal."""
        logs = [
            make_log("a", "2024-01-01", 2),
            make_log("a", "2024-01-02", 2),
            make_log("a", "2024-01-03", 2),
            make_log("a", "2024-01-04", 3),
        ]
        # 9 / 4 = 2.25; built-in round() would give 2.2
        assert stats.aggregate_by_month(logs)[0]["avg"] == 2.3

    def test_empty_input(self, stats: StatisticsEngine) -> None:
        """Empty log sets give empty series."""
        assert stats.aggregate_by_day([]) == []
        assert stats.aggregate_by_week([]) == []
        assert stats.aggregate_by_month([]) == []


class TestCompletionRates:
    """Tests for habit_completion_rates and alignment_percent."""

    def test_rates_per_habit(self, stats: StatisticsEngine) -> None:
        """One row per habit, in input order."""
        read = make_habit("read", weight=3)
        gym = make_habit("gym", weight=5)
        logs = [
            make_log("read", "2026-03-01", 3),
            make_log("read", "2026-03-02", 0, completed=False),
            make_log("read", "2026-03-03", 1),
            make_log("gym", "2026-03-01", 5),
        ]

        rates = stats.habit_completion_rates([read, gym], logs)

        assert rates == [
            {
                "habit": read,
                "completed_days": 2,
                "total_days": 3,
                "percent": 67,
                "total_score": 4,
            },
            {
                "habit": gym,
                "completed_days": 1,
                "total_days": 1,
                "percent": 100,
                "total_score": 5,
            },
        ]

    def test_habit_without_logs(self, stats: StatisticsEngine) -> None:
        """No rows gives a zero percent rather than an error."""
        rates = stats.habit_completion_rates([make_habit("a")], [])
        assert rates[0]["percent"] == 0
        assert rates[0]["total_days"] == 0

    def test_alignment_is_unweighted_mean(self, stats: StatisticsEngine) -> None:
        """Heavy habits do not dominate the alignment percentage."""
        habits = [make_habit("a", weight=10), make_habit("b", weight=1)]
        logs = [
            make_log("a", "2026-03-01", 10),
            make_log("a", "2026-03-02", 0, completed=False),
            make_log("b", "2026-03-01", 1),
        ]
        # (50 + 100) / 2
        assert stats.alignment_percent(habits, logs) == 75

    def test_alignment_rounds_half_up(self, stats: StatisticsEngine) -> None:
        """A mean of 62.5 is reported as 63."""
        habits = [make_habit("a"), make_habit("b")]
        logs = [
            make_log("a", "2026-03-01"),
            make_log("a", "2026-03-02", completed=False),
            make_log("b", "2026-03-01"),
            make_log("b", "2026-03-02"),
            make_log("b", "2026-03-03"),
            make_log("b", "2026-03-04", completed=False),
        ]
        # (50 + 75) / 2 = 62.5
        assert stats.alignment_percent(habits, logs) == 63

    def test_alignment_empty(self, stats: StatisticsEngine) -> None:
        """No habits or no logs gives 0."""
        assert stats.alignment_percent([], [make_log("a", "2026-03-01")]) == 0
        assert stats.alignment_percent([make_habit("a")], []) == 0


class TestDayHelpers:
    """Tests for daily_score, max_daily_score and daily_percent."""

    def test_daily_percent(self, stats: StatisticsEngine) -> None:
        """Earned over possible, as a whole percentage."""
        habits = [make_habit("a", 3), make_habit("b", 5)]
        logs = [make_log("a", "2026-03-02", 3), make_log("b", "2026-03-02", 0, False)]

        assert stats.daily_score(logs) == 3
        assert stats.max_daily_score(habits) == 8
        assert stats.daily_percent(logs, habits) == 38  # 37.5 half-up

    def test_daily_percent_without_habits(self, stats: StatisticsEngine) -> None:
        """No possible score gives 0."""
        assert stats.daily_percent([], []) == 0


class TestMapsAndLabels:
    """Tests for maps, heatmap levels, alignment labels and the summary."""

    def test_score_map(self, stats: StatisticsEngine) -> None:
        """Completed score keyed by date."""
        logs = [
            make_log("a", "2026-03-01", 2),
            make_log("b", "2026-03-01", 3),
            make_log("a", "2026-03-02", 1, completed=False),
        ]
        assert stats.build_score_map(logs) == {"2026-03-01": 5}

    def test_completion_map(self, stats: StatisticsEngine) -> None:
        """Every row appears, completed or not."""
        logs = [
            make_log("a", "2026-03-01"),
            make_log("a", "2026-03-02", completed=False),
            make_log("b", "2026-03-01"),
        ]
        assert stats.build_completion_map(logs) == {
            "a": {"2026-03-01": True, "2026-03-02": False},
            "b": {"2026-03-01": True},
        }

    @pytest.mark.parametrize(
        ("score", "max_score", "expected"),
        [
            (0, 20, 0),
            (5, 0, 0),
            (1, 20, 1),
            (5, 20, 1),
            (6, 20, 2),
            (10, 20, 2),
            (11, 20, 3),
            (15, 20, 3),
            (16, 20, 4),
            (20, 20, 4),
            (25, 20, 4),
        ],
    )
    def test_heatmap_level(
        self, stats: StatisticsEngine, score: int, max_score: int, expected: int
    ) -> None:
        """Quartile buckets with 0 reserved for no score."""
        assert stats.heatmap_level(score, max_score) == expected

    @pytest.mark.parametrize(
        ("percent", "label", "emoji"),
        [
            (100, "Elite mode", "🔥"),
            (90, "Elite mode", "🔥"),
            (89, "High consistency", "💪"),
            (60, "Evolving", "📈"),
            (40, "Building the base", "🧱"),
            (20, "Start of the journey", "🌱"),
            (19, "Not started yet", "⚡"),
            (0, "Not started yet", "⚡"),
        ],
    )
    def test_alignment_label(
        self, stats: StatisticsEngine, percent: int, label: str, emoji: str
    ) -> None:
        """Labels are picked by minimum percentage."""
        assert stats.alignment_label(percent) == {"label": label, "emoji": emoji}

    def test_summarize(self, stats: StatisticsEngine) -> None:
        """Headline numbers over positive days and latest periods."""
        logs = [
            make_log("a", "2026-02-27", 4),
            make_log("a", "2026-03-01", 6),
            make_log("a", "2026-03-02", 1),
            make_log("b", "2026-03-02", 0),
        ]

        summary = stats.summarize(
            stats.aggregate_by_day(logs),
            stats.aggregate_by_week(logs),
            stats.aggregate_by_month(logs),
        )

        assert summary == {
            "total_all_time": 11,
            "avg_daily": 3.7,
            "best_day": 6,
            "weekly_total": 1,
            "monthly_total": 7,
            "active_days": 3,
        }

    def test_summarize_empty(self, stats: StatisticsEngine) -> None:
        """Empty series give zeros."""
        assert stats.summarize([], [], []) == {
            "total_all_time": 0,
            "avg_daily": 0.0,
            "best_day": 0,
            "weekly_total": 0,
            "monthly_total": 0,
            "active_days": 0,
        }
