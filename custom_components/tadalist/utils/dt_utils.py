# File: utils/dt_utils.py
"""Date and time utilities for TaDa List.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Uses standard library: datetime, zoneinfo; third-party: dateutil.

Calendar days are represented by ISO date strings ("YYYY-MM-DD") computed in
the configured local timezone. Timestamps are stored as UTC-aware ISO 8601
strings.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_yesterday_iso: Get the day before today (or a reference date)
    - dt_days_ago_iso: Get the date N days before today (or a reference date)
    - dt_now_utc / dt_now_iso: Current datetime helpers
    - dt_parse_date: Parse date strings
    - dt_parse: Normalize datetime inputs to timezone-aware datetimes
    - dt_to_utc_iso: Normalize a timestamp to a UTC ISO string
    - dt_to_local_date_iso: Calendar day of a timestamp in local timezone
    - dt_resolve_date: Normalize an optional reference date
    - are_consecutive_days: Whole-calendar-day adjacency check
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil import parser as dateutil_parser

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Today's date in the specified timezone.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD).

    Example:
        "2025-04-07"
    """
    return dt_today_local(tz).isoformat()


def dt_resolve_date(
    reference_date: date | datetime | str | None = None,
    tz: ZoneInfo | None = None,
) -> date:
    """Resolve an optional reference date to a `datetime.date`.

    None means "today" in the local timezone. Datetimes are converted to the
    local timezone before taking the date. ISO date strings are parsed.

    Args:
        reference_date: Date, datetime, ISO string or None
        tz: Optional timezone override

    Returns:
        The calendar date to treat as "today".
    """
    if reference_date is None:
        return dt_today_local(tz)
    if isinstance(reference_date, datetime):
        return as_local(reference_date, tz).date()
    if isinstance(reference_date, date):
        return reference_date
    parsed = dt_parse_date(reference_date)
    if parsed is None:
        _LOGGER.warning(
            "Unparseable reference date '%s', falling back to today",
            reference_date,
        )
        return dt_today_local(tz)
    return parsed


def dt_yesterday_iso(
    reference_date: date | datetime | str | None = None,
    tz: ZoneInfo | None = None,
) -> str:
    """Return the calendar day before `reference_date` (default today) as ISO."""
    return (dt_resolve_date(reference_date, tz) - timedelta(days=1)).isoformat()


def dt_days_ago_iso(
    days: int,
    reference_date: date | datetime | str | None = None,
    tz: ZoneInfo | None = None,
) -> str:
    """Return the calendar day `days` before `reference_date` as ISO string."""
    return (dt_resolve_date(reference_date, tz) - timedelta(days=days)).isoformat()


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string.

    Example:
        "2025-04-07T19:30:00.123456+00:00"
    """
    return dt_now_utc().isoformat()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Naive datetimes are assumed to be in DEFAULT_TIME_ZONE.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=DEFAULT_TIME_ZONE)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to be in UTC.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts "2025-04-07" and full ISO datetimes (the date part is used).

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        return None


def dt_parse(
    dt_input: str | date | datetime | None,
    default_tzinfo: ZoneInfo | None = None,
) -> datetime | None:
    """Normalize various datetime inputs to a timezone-aware datetime.

    Strings are parsed as ISO 8601 first (including a trailing "Z"); anything
    else is handed to dateutil's lenient parser. Naive results get
    `default_tzinfo` (DEFAULT_TIME_ZONE if None).

    Args:
        dt_input: String, date or datetime to normalize, or None
        default_tzinfo: Timezone to use if the input is naive

    Returns:
        Timezone-aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15T10:00:00.000Z")
        datetime.datetime(2025, 4, 15, 10, 0, tzinfo=datetime.timezone.utc)
    """
    if not dt_input:
        return None

    tz_info = default_tzinfo or DEFAULT_TIME_ZONE
    result: datetime | None = None

    if isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input)
        except ValueError:
            try:
                result = dateutil_parser.parse(dt_input)
            except (ValueError, OverflowError):
                _LOGGER.debug("Unparseable datetime string '%s'", dt_input)
                return None

    elif isinstance(dt_input, datetime):
        result = dt_input

    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())

    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)

    return result


def dt_to_utc_iso(dt_input: str | date | datetime | None) -> str | None:
    """Parse a timestamp and return it as a UTC ISO 8601 string.

    Returns:
        UTC ISO string, or None if parsing fails.

    Example:
        "2025-04-07T14:30:00.000Z" -> "2025-04-07T14:30:00+00:00"
    """
    parsed = dt_parse(dt_input)
    if parsed is None:
        return None
    return as_utc(parsed).isoformat()


def dt_to_local_date_iso(
    dt_input: str | date | datetime | None, tz: ZoneInfo | None = None
) -> str | None:
    """Return the local calendar day ("YYYY-MM-DD") a timestamp falls on.

    Args:
        dt_input: Timestamp (ISO string or datetime)
        tz: Optional timezone override

    Returns:
        Calendar-day identifier, or None if the timestamp can't be parsed.
    """
    parsed = dt_parse(dt_input)
    if parsed is None:
        return None
    return as_local(parsed, tz).date().isoformat()


# ==============================================================================
# Calendar Day Arithmetic
# ==============================================================================


def are_consecutive_days(first: str | date, second: str | date) -> bool:
    """Return True if two calendar days are exactly one day apart.

    Uses calendar-date subtraction, so DST transitions and time-of-day never
    matter. Argument order does not matter.

    Args:
        first: ISO date string or date
        second: ISO date string or date

    Returns:
        True when |first - second| == 1 day, False for equal dates, larger
        gaps, or unparseable input.
    """
    first_date = first if isinstance(first, date) else dt_parse_date(first)
    second_date = second if isinstance(second, date) else dt_parse_date(second)
    if first_date is None or second_date is None:
        return False
    return abs((second_date - first_date).days) == 1
