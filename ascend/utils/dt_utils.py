# File: utils/dt_utils.py
"""Date and time utilities for Ascend.

Pure Python date/time functions. Every calendar computation in the engines is
routed through this module so the whole system agrees on a single canonical
timezone (UTC-3 by default) and a single date-key format ("YYYY-MM-DD").

Uses standard library: datetime, zoneinfo; plus dateutil.

Functions:
    - set_default_timezone / get_default_timezone: Canonical timezone switch
    - dt_now_local: Current datetime in the canonical timezone
    - dt_today_local / dt_today_iso / dt_yesterday_iso: "Today" helpers
    - dt_resolve_today: Normalize an optional reference date to a date
    - as_local: Convert a datetime to the canonical timezone
    - dt_parse_date: Parse date strings
    - dt_to_date / dt_date_key: Map instants, dates and strings to calendar days
    - dt_day_of_week: Weekday with 0 = Sunday
    - dt_days_between / dt_shift_days: Calendar-day arithmetic
    - dt_parse_time_of_day / dt_combine_local: "HH:MM" handling
    - dt_iso_week_key / dt_month_key / dt_year_key: Period keys
    - dt_date_range: Inclusive range of date keys
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil.rrule import DAILY, rrule

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Canonical timezone (UTC-3) - can be overridden by caller
DEFAULT_TIME_ZONE: tzinfo = ZoneInfo("Etc/GMT+3")

DATE_KEY_FORMAT = "%Y-%m-%d"
MONTH_KEY_FORMAT = "%Y-%m"
YEAR_KEY_FORMAT = "%Y"

# Safety limit for range expansion
MAX_DATE_RANGE_DAYS = 3660


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: tzinfo) -> None:
    """Set the canonical timezone for all dt_utils functions.

    Call this once at application start. Mixing timezones between calls
    produces inconsistent streak and strict-mode boundaries.

    Args:
        tz: tzinfo object (usually a ZoneInfo) for the canonical timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> tzinfo:
    """Get the current canonical timezone.

    Returns:
        The configured canonical timezone
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: tzinfo | None = None) -> datetime:
    """Return the current datetime in the canonical timezone (timezone-aware).

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Current datetime in the specified timezone.
    """
    return datetime.now(tz or DEFAULT_TIME_ZONE)


def dt_today_local(tz: tzinfo | None = None) -> date:
    """Return today's date in the canonical timezone.

    Example:
        datetime.date(2025, 4, 7)
    """
    return dt_now_local(tz).date()


def dt_today_iso(tz: tzinfo | None = None) -> str:
    """Return today's date key (YYYY-MM-DD) in the canonical timezone."""
    return dt_today_local(tz).isoformat()


def dt_resolve_today(
    reference_date: str | date | datetime | None = None,
    tz: tzinfo | None = None,
) -> date:
    """Normalize an optional "today" reference to a calendar date.

    Engines accept an explicit reference so that one logical operation can
    thread a single "now" through every call. When omitted, the current date
    in the canonical timezone is used.

    Args:
        reference_date: Date key, date, datetime or None
        tz: Optional timezone override

    Returns:
        The reference calendar day.
    """
    if reference_date is None:
        return dt_today_local(tz)
    return dt_to_date(reference_date, tz)


def dt_yesterday_iso(
    reference_date: str | date | datetime | None = None,
    tz: tzinfo | None = None,
) -> str:
    """Return the date key of the day before the reference (default: today)."""
    return (dt_resolve_today(reference_date, tz) - timedelta(days=1)).isoformat()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_local(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert a datetime to the canonical timezone.

    Naive datetimes are taken to be wall-clock time in the canonical timezone
    already and only get the tzinfo attached.

    Args:
        dt_obj: Datetime object
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Timezone-aware datetime in the canonical timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=tz_info)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Date Parsing and Calendar Keys
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "2025-04-07T10:00:00" (ISO datetime, date part is kept)
    - "2025/04/07"

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    cleaned = date_str.strip()

    # Try ISO format first (most common)
    try:
        return date.fromisoformat(cleaned)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(cleaned).date()
    except ValueError:
        pass

    try:
        return datetime.strptime(cleaned, "%Y/%m/%d").date()
    except ValueError:
        return None


def dt_to_date(value: str | date | datetime, tz: tzinfo | None = None) -> date:
    """Map an instant, date or date string to a calendar day.

    Aware datetimes are converted to the canonical timezone before taking the
    date, so an instant always lands on the same calendar day regardless of
    the offset it was expressed in.

    Args:
        value: Datetime, date or date string
        tz: Optional timezone override

    Returns:
        Calendar date in the canonical timezone

    Raises:
        ValueError: If a string cannot be parsed as a date
    """
    if isinstance(value, datetime):
        return as_local(value, tz).date()
    if isinstance(value, date):
        return value
    parsed = dt_parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date value: {value!r}")
    return parsed


def dt_date_key(value: str | date | datetime, tz: tzinfo | None = None) -> str:
    """Return the canonical "YYYY-MM-DD" key for a value.

    Example:
        dt_date_key(datetime(2026, 1, 1, 1, 30, tzinfo=UTC)) → "2025-12-31"
    """
    return dt_to_date(value, tz).isoformat()


def dt_day_of_week(value: str | date | datetime) -> int:
    """Return the weekday of a day, 0 = Sunday .. 6 = Saturday."""
    return (dt_to_date(value).weekday() + 1) % 7


def dt_days_between(
    start: str | date | datetime,
    end: str | date | datetime,
) -> int:
    """Return the signed number of calendar days from `start` to `end`.

    Time of day is ignored.

    Examples:
        dt_days_between("2026-01-01", "2026-01-03") → 2
        dt_days_between("2026-01-03", "2026-01-01") → -2
    """
    return (dt_to_date(end) - dt_to_date(start)).days


def dt_shift_days(value: str | date | datetime, days: int) -> str:
    """Return the date key `days` calendar days after `value` (negative = before)."""
    return (dt_to_date(value) + timedelta(days=days)).isoformat()


def dt_iso_week_key(value: str | date | datetime) -> str:
    """Return the ISO-8601 week key "YYYY-Www" (Monday weeks, ISO year).

    Examples:
        dt_iso_week_key("2026-01-19") → "2026-W04"
        dt_iso_week_key("2024-12-30") → "2025-W01"
    """
    iso_year, iso_week, _ = dt_to_date(value).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def dt_month_key(value: str | date | datetime) -> str:
    """Return the "YYYY-MM" key of a day."""
    return dt_to_date(value).strftime(MONTH_KEY_FORMAT)


def dt_year_key(value: str | date | datetime) -> str:
    """Return the "YYYY" key of a day."""
    return dt_to_date(value).strftime(YEAR_KEY_FORMAT)


def dt_date_range(
    start: str | date | datetime,
    end: str | date | datetime,
) -> list[str]:
    """Return every date key from `start` to `end`, inclusive.

    Empty when `end` is before `start`. Capped at MAX_DATE_RANGE_DAYS entries.
    """
    start_date = dt_to_date(start)
    end_date = dt_to_date(end)
    if end_date < start_date:
        return []

    rule = rrule(
        DAILY,
        dtstart=datetime.combine(start_date, time.min),
        until=datetime.combine(end_date, time.min),
    )
    result: list[str] = []
    for occurrence in rule:
        if len(result) >= MAX_DATE_RANGE_DAYS:
            _LOGGER.warning(
                "Date range %s..%s truncated at %d days",
                start_date,
                end_date,
                MAX_DATE_RANGE_DAYS,
            )
            break
        result.append(occurrence.strftime(DATE_KEY_FORMAT))
    return result


# ==============================================================================
# Time of Day
# ==============================================================================


def dt_parse_time_of_day(value: str | time | None) -> time | None:
    """Parse an "HH:MM" (or "HH:MM:SS") 24-hour string into a `datetime.time`.

    Args:
        value: Time string, time object or None

    Returns:
        time object, or None if empty or invalid (a warning is logged).

    Examples:
        dt_parse_time_of_day("07:30") → time(7, 30)
        dt_parse_time_of_day("25:00") → None
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        _LOGGER.warning("Invalid time format: %s (expected HH:MM)", value)
        return None

    try:
        hour = int(parts[0])
        minute = int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
    except ValueError:
        _LOGGER.warning("Invalid time format: %s (expected HH:MM)", value)
        return None

    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        _LOGGER.warning("Invalid time value: %s (out of range)", value)
        return None

    return time(hour, minute, second)


def dt_combine_local(
    day: str | date | datetime,
    time_of_day: time,
    tz: tzinfo | None = None,
) -> datetime:
    """Compose a calendar day and a time of day into an aware datetime.

    Example:
        dt_combine_local("2026-03-02", time(7, 0))
        → datetime(2026, 3, 2, 7, 0, tzinfo=ZoneInfo("Etc/GMT+3"))
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.combine(dt_to_date(day), time_of_day.replace(tzinfo=None)).replace(
        tzinfo=tz_info
    )
