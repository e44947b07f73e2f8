"""Calendar date helpers that never raise on bad input.

Dates reach the engine from imports and manual entry, so every helper here
reports failure with the empty-string sentinel (or 0 / False) instead of an
exception. Valid dates are ISO ``YYYY-MM-DD`` in the range 1900-2100.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

from compliance_loop.core.clock import Clock, SystemClock, utc_date_iso

DateLike = Union[str, date, datetime, None]

MIN_YEAR = 1900
MAX_YEAR = 2100

_ISO_DATE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")


def normalize_date(value: DateLike) -> str:
    """Return ``value`` as ``YYYY-MM-DD``, or ``""`` if it is not a valid date.

    Strings may carry a time component (``2026-01-05T10:00:00Z`` or
    ``2026-01-05 10:00``); it is dropped. Impossible dates such as
    ``2026-02-30`` are rejected. Strings and datetimes both keep the calendar
    date they carry; no time zone shift is applied, so
    ``2026-01-05T23:30:00-05:00`` and the equivalent aware datetime both give
    ``2026-01-05``. Use ``today_iso`` for the UTC date of an instant.
    """
    if value is None:
        return ""

    if isinstance(value, datetime):
        value = value.date()

    if isinstance(value, date):
        if not MIN_YEAR <= value.year <= MAX_YEAR:
            return ""
        return value.isoformat()

    if not isinstance(value, str):
        return ""

    date_part = value.strip().split("T")[0].split(" ")[0]
    match = _ISO_DATE.match(date_part)
    if not match:
        return ""

    year, month, day = (int(part) for part in match.groups())
    if not MIN_YEAR <= year <= MAX_YEAR:
        return ""

    try:
        parsed = date(year, month, day)
    except ValueError:
        return ""

    return parsed.isoformat()


def _to_date(value: DateLike) -> Union[date, None]:
    normalized = normalize_date(value)
    if not normalized:
        return None
    return date.fromisoformat(normalized)


def days_between(a: DateLike, b: DateLike) -> int:
    """Absolute number of calendar days between two dates; 0 if either is invalid."""
    first = _to_date(a)
    second = _to_date(b)
    if first is None or second is None:
        return 0
    return abs((second - first).days)


def is_before(a: DateLike, b: DateLike) -> bool:
    """True when ``a`` falls strictly before ``b``; False if either is invalid."""
    first = normalize_date(a)
    second = normalize_date(b)
    if not first or not second:
        return False
    return first < second


def add_days(value: DateLike, days: int) -> str:
    """Shift a date by ``days`` (may be negative); ``""`` if the input or result is invalid."""
    start = _to_date(value)
    if start is None:
        return ""
    try:
        shifted = start + timedelta(days=days)
    except OverflowError:
        return ""
    return normalize_date(shifted)


def today_iso(clock: Optional[Clock] = None) -> str:
    """Current UTC calendar date from ``clock`` (the wall clock by default)."""
    return utc_date_iso((clock or SystemClock()).now())
