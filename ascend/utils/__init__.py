# File: utils/__init__.py
"""Pure Python utilities for Ascend.

Submodules:
    - dt_utils: Canonical calendar, date keys, time-of-day parsing
    - math_utils: Score flooring, half-up rounding, percentages

Usage:
    from . import dt_utils
    from .math_utils import floor_score
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
