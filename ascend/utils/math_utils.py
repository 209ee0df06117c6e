# File: utils/math_utils.py
"""Math and calculation utilities for Ascend.

Pure Python math functions shared by the scoring and statistics engines.

Functions:
    - floor_score: Floor a score to a non-negative integer with a minimum
    - round_half_up: Round to nearest, halves away from zero
    - calculate_percentage: Integer completion percentage
    - safe_ratio: Division with zero-denominator protection
    - mean: Arithmetic mean of a sequence
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
import math


# ==============================================================================
# Score Arithmetic
# ==============================================================================


def floor_score(value: float, minimum: int = 0) -> int:
    """Floor a score to an integer, never below `minimum`.

    Scores are floored rather than rounded so that fractional credit is never
    inflated.

    Examples:
        floor_score(7.5) → 7
        floor_score(0.5, minimum=1) → 1
        floor_score(-3) → 0
    """
    return max(minimum, max(0, math.floor(value)))


def round_half_up(value: float, precision: int = 0) -> float:
    """Round to `precision` decimals with halves rounded away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2); report
    figures use the conventional half-up rule instead.

    Examples:
        round_half_up(2.5) → 3.0
        round_half_up(66.666, 1) → 66.7
        round_half_up(0.25, 1) → 0.3
    """
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def calculate_percentage(current: float, total: float) -> int:
    """Calculate an integer percentage, half-up rounded.

    Examples:
        calculate_percentage(1, 3) → 33
        calculate_percentage(1, 8) → 13
        calculate_percentage(5, 0) → 0  # Division by zero protection
    """
    if total <= 0:
        return 0
    return int(round_half_up(current / total * 100))


def mean(values: Sequence[float]) -> float:
    """Return the arithmetic mean of `values`, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)
