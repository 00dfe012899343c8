"""
Inclusive date-span arithmetic for bookings.

A booking from day N to day N is one day. Dates are handled as calendar
fields (year, month, day) and never as instants, so a stored "YYYY-MM-DD"
string always comes back as the same calendar day whatever the process
timezone is.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ooh_billing.core.exceptions import DateParseError, InvalidBookedDaysError, InvalidDateRangeError


DateLike = Union[date, datetime, str]

_CANONICAL_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# Reconstructed dates sit at local noon so no offset can push them across midnight
_ANCHOR_HOUR = 12


def to_canonical_date_string(value: Union[date, datetime]) -> str:
    """Serialize a date or datetime to "YYYY-MM-DD" from its own calendar fields."""
    if not isinstance(value, date):
        raise DateParseError(value)
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def from_canonical_date_string(value: str) -> datetime:
    """
    Parse "YYYY-MM-DD" into a naive local datetime anchored at noon.

    Raises:
        DateParseError: If the string is not a valid canonical calendar date.
    """
    if not isinstance(value, str):
        raise DateParseError(value)
    match = _CANONICAL_DATE_RE.match(value.strip())
    if not match:
        raise DateParseError(value)
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, _ANCHOR_HOUR, 0, 0)
    except ValueError:
        raise DateParseError(value) from None


def as_calendar_date(value: DateLike) -> date:
    """Normalize a date, datetime or canonical string to a plain calendar date."""
    if isinstance(value, datetime):
        return date(value.year, value.month, value.day)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return from_canonical_date_string(value).date()
    raise DateParseError(value)


def optional_calendar_date(value: Optional[DateLike]) -> Optional[date]:
    if value is None or value == "":
        return None
    return as_calendar_date(value)


def days_between_inclusive(start: DateLike, end: DateLike) -> int:
    """
    Count the calendar days from start to end, both ends included.

    Same-day ranges count as 1.

    Raises:
        InvalidDateRangeError: If end is before start.
    """
    start_day = as_calendar_date(start)
    end_day = as_calendar_date(end)
    if end_day < start_day:
        raise InvalidDateRangeError(start_day, end_day)
    return max((end_day - start_day).days + 1, 1)


def end_from_start_and_days(start: DateLike, days: int) -> DateLike:
    """
    Return the inclusive end of a booking of `days` days beginning at `start`.

    The result has the same type as `start` (date, datetime or canonical string),
    so `end_from_start_and_days(s, days_between_inclusive(s, e)) == e`.

    Raises:
        InvalidBookedDaysError: If days is below 1.
    """
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise InvalidBookedDaysError(days)
    offset = timedelta(days=days - 1)
    if isinstance(start, str):
        return to_canonical_date_string(from_canonical_date_string(start) + offset)
    if isinstance(start, date):
        return start + offset
    raise DateParseError(start)


def overlap_days(
    range_start: DateLike,
    range_end: DateLike,
    period_start: DateLike,
    period_end: DateLike,
) -> int:
    """Inclusive number of days two ranges share; 0 when they do not meet."""
    overlap_start = max(as_calendar_date(range_start), as_calendar_date(period_start))
    overlap_end = min(as_calendar_date(range_end), as_calendar_date(period_end))
    if overlap_end < overlap_start:
        return 0
    return (overlap_end - overlap_start).days + 1


def starts_in_period(start: DateLike, period_start: DateLike, period_end: DateLike) -> bool:
    """Whether a booking starting on `start` begins inside the period (inclusive)."""
    day = as_calendar_date(start)
    return as_calendar_date(period_start) <= day <= as_calendar_date(period_end)
