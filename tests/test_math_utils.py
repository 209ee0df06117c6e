"""Tests for math_utils score arithmetic and rounding."""

from __future__ import annotations

import pytest

from ascend.utils.math_utils import (
    calculate_percentage,
    floor_score,
    mean,
    round_half_up,
    safe_ratio,
)


class TestFloorScore:
    """Tests for floor_score."""

    @pytest.mark.parametrize(
        ("value", "minimum", "expected"),
        [
            (7.5, 0, 7),
            (7.99, 0, 7),
            (0.5, 1, 1),
            (5.0, 1, 5),
            (-3, 0, 0),
        ],
    )
    def test_floor_with_minimum(self, value: float, minimum: int, expected: int) -> None:
        """Scores are floored and clamped to the minimum."""
        assert floor_score(value, minimum=minimum) == expected


class TestRoundHalfUp:
    """Tests for round_half_up (differs from built-in round on halves)."""

    @pytest.mark.parametrize(
        ("value", "precision", "expected"),
        [
            (2.5, 0, 3.0),
            (3.5, 0, 4.0),
            (0.25, 1, 0.3),
            (66.666, 1, 66.7),
            (5.0, 1, 5.0),
            (2.4, 0, 2.0),
        ],
    )
    def test_halves_round_up(self, value: float, precision: int, expected: float) -> None:
        """Halves go away from zero."""
        assert round_half_up(value, precision) == expected

    def test_differs_from_bankers_rounding(self) -> None:
        """Built-in round(2.5) is 2; reports use 3."""
        assert round(2.5) == 2
        assert round_half_up(2.5) == 3


class TestPercentages:
    """Tests for calculate_percentage, safe_ratio and mean."""

    @pytest.mark.parametrize(
        ("current", "total", "expected"),
        [
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),
            (3, 3, 100),
            (0, 5, 0),
            (5, 0, 0),
        ],
    )
    def test_calculate_percentage(self, current: int, total: int, expected: int) -> None:
        """Integer percentages, half-up, zero-safe."""
        assert calculate_percentage(current, total) == expected

    def test_safe_ratio(self) -> None:
        """Non-positive denominators give 0.0."""
        assert safe_ratio(1, 4) == 0.25
        assert safe_ratio(1, 0) == 0.0

    def test_mean(self) -> None:
        """Mean of an empty sequence is 0.0."""
        assert mean([50, 100]) == 75.0
        assert mean([]) == 0.0
