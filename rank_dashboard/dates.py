"""Calendar helpers for ISO ``YYYY-MM-DD`` strings.

All dates are UTC calendar days with no time of day. Two valid ISO date
strings compare chronologically under plain string comparison, which the
rest of the package relies on for sorting and window filters.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Union

from .errors import InvalidDateFormat

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(s: str) -> datetime:
    """Parse ``YYYY-MM-DD`` into a UTC midnight ``datetime``.

    Only the zero-padded form is accepted so that lexicographic order stays
    chronological; ``2025-1-5`` and ``2025-02-30`` both raise
    ``InvalidDateFormat``.
    """
    if not isinstance(s, str) or not _ISO_DATE_RE.match(s):
        raise InvalidDateFormat(s)
    try:
        d = date.fromisoformat(s)
    except ValueError:
        raise InvalidDateFormat(s) from None
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def format_date(instant: Union[datetime, date]) -> str:
    if isinstance(instant, datetime):
        if instant.tzinfo is not None:
            instant = instant.astimezone(timezone.utc)
        instant = instant.date()
    return f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"


def add_days(s: str, n: int) -> str:
    """Return the ISO date ``n`` calendar days after ``s`` (``n`` may be negative)."""
    return format_date(parse_date(s) + timedelta(days=n))


def shift_within_calendar(s: str, n: int) -> str:
    """Like ``add_days`` but clamps to 0001-01-01 and 9999-12-31 instead of overflowing.

    Used for window bounds, which only need to compare correctly.
    """
    try:
        return add_days(s, n)
    except OverflowError:
        return format_date(date.min if n < 0 else date.max)


def is_iso_date(s: object) -> bool:
    try:
        parse_date(s)  # type: ignore[arg-type]
    except InvalidDateFormat:
        return False
    return True


def today_utc() -> str:
    return format_date(datetime.now(timezone.utc))
