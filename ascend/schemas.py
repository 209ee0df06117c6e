"""Voluptuous schemas for flat habit and log records.

Storage hands the engine flat rows. These schemas normalize and coerce the
fields the engine reads; extra columns (owner, color, icon, timestamps) are
passed through untouched. Cross-field rules (weekly habits need weekdays) live
in data_builders, not here.

Cycle fields are deliberately lenient: malformed values are coerced to None so
the recurrence engine can degrade ("never applicable") instead of the whole
habit being rejected.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import voluptuous as vol

from . import const
from .utils.dt_utils import dt_parse_date, dt_parse_time_of_day

# =============================================================================
# FIELD VALIDATORS
# =============================================================================


def validate_date_key(value: Any) -> str:
    """Validate a calendar day and return its "YYYY-MM-DD" key.

    Raises:
        vol.Invalid: If the value is not a date or parsable date string
    """
    if isinstance(value, datetime):
        raise vol.Invalid(f"Expected a calendar date, got datetime {value!r}")
    if isinstance(value, date):
        return value.isoformat()
    parsed = dt_parse_date(value) if isinstance(value, str) else None
    if parsed is None:
        raise vol.Invalid(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
    return parsed.isoformat()


def validate_time_of_day(value: Any) -> Any:
    """Validate an "HH:MM" time of day and return it as `datetime.time`.

    Raises:
        vol.Invalid: If the value is not a valid 24-hour time
    """
    parsed = dt_parse_time_of_day(value)
    if parsed is None:
        raise vol.Invalid(f"Invalid time of day: {value!r} (expected HH:MM)")
    return parsed


def validate_timestamp(value: Any) -> datetime:
    """Validate an ISO-8601 timestamp (or datetime) and return a datetime.

    Raises:
        vol.Invalid: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as err:
            raise vol.Invalid(f"Invalid timestamp: {value!r}") from err
    raise vol.Invalid(f"Invalid timestamp: {value!r}")


def lenient_int(value: Any) -> int | None:
    """Coerce to int, or None when the value is missing or malformed."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def lenient_date(value: Any) -> date | None:
    """Coerce to a date, or None when the value is missing or malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return dt_parse_date(value)
    return None


def lenient_str(value: Any) -> str | None:
    """Coerce to a stripped string, or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# =============================================================================
# RECORD SCHEMAS
# =============================================================================

HABIT_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_HABIT_ID): vol.Coerce(str),
        vol.Required(const.DATA_HABIT_NAME): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Optional(
            const.DATA_HABIT_WEIGHT, default=const.DEFAULT_HABIT_WEIGHT
        ): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional(
            const.DATA_HABIT_FREQUENCY, default=const.DEFAULT_HABIT_FREQUENCY
        ): vol.In(const.FREQUENCY_OPTIONS),
        vol.Optional(const.DATA_HABIT_DAYS_OF_WEEK, default=None): vol.Any(
            None,
            [
                vol.All(
                    vol.Coerce(int),
                    vol.Range(min=const.WEEKDAY_SUNDAY, max=const.WEEKDAY_SATURDAY),
                )
            ],
        ),
        vol.Optional(const.DATA_HABIT_IDEAL_TIME, default=None): vol.Any(
            None, "", validate_time_of_day
        ),
        vol.Optional(const.DATA_HABIT_STRICT_MODE, default=False): vol.Boolean(),
        vol.Optional(const.DATA_HABIT_GOAL_VALUE, default=None): vol.Any(
            None, vol.Coerce(float)
        ),
        vol.Optional(const.DATA_HABIT_GOAL_UNIT, default=None): lenient_str,
        vol.Optional(const.DATA_HABIT_CYCLE_START, default=None): lenient_date,
        vol.Optional(const.DATA_HABIT_CYCLE_TYPE, default=None): lenient_str,
        vol.Optional(const.DATA_HABIT_CYCLE_DAYS, default=None): lenient_int,
        vol.Optional(const.DATA_HABIT_CYCLE_PATTERN, default=None): lenient_str,
        vol.Optional(const.DATA_HABIT_IS_ACTIVE, default=True): vol.Boolean(),
        vol.Optional(const.DATA_HABIT_IS_PAUSED, default=False): vol.Boolean(),
    },
    extra=vol.ALLOW_EXTRA,
)

LOG_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_LOG_HABIT_ID): vol.Coerce(str),
        vol.Required(const.DATA_LOG_DATE): validate_date_key,
        vol.Optional(const.DATA_LOG_COMPLETED, default=False): vol.Boolean(),
        vol.Optional(const.DATA_LOG_COMPLETED_AT, default=None): vol.Any(
            None, validate_timestamp
        ),
        vol.Optional(const.DATA_LOG_SCORE_EARNED, default=0): vol.Any(
            None, vol.All(vol.Coerce(int), vol.Range(min=0))
        ),
        vol.Optional(const.DATA_LOG_PENALTY_APPLIED, default=False): vol.Boolean(),
        vol.Optional(const.DATA_LOG_VALUE_LOGGED, default=None): vol.Any(
            None, vol.Coerce(float)
        ),
    },
    extra=vol.ALLOW_EXTRA,
)
