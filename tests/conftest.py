"""Shared fixtures for Ascend tests."""

from collections.abc import Iterator
from datetime import tzinfo
from zoneinfo import ZoneInfo

import pytest

from ascend import const
from ascend.utils import dt_utils

# Canonical zone (UTC-3)
CANONICAL_TZ = ZoneInfo(const.DEFAULT_TIME_ZONE_NAME)

# 2026-03-03 is a Tuesday
REFERENCE_DATE = "2026-03-03"


@pytest.fixture(autouse=True)
def restore_default_timezone() -> Iterator[None]:
    """Restore the canonical timezone after tests that override it."""
    saved = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(saved)


@pytest.fixture
def canonical_tz() -> tzinfo:
    """Return the canonical UTC-3 timezone."""
    return CANONICAL_TZ


@pytest.fixture
def reference_date() -> str:
    """Return the fixed "today" used by streak and period tests."""
    return REFERENCE_DATE
