"""
Calendar date helpers.

Every availability comparison goes through normalize_date() so that
stays are compared as whole calendar days, never as timestamps.
"""

import re
import calendar
from datetime import date, datetime, timedelta
from typing import List, Tuple, Union
from zoneinfo import ZoneInfo

from ..config import settings

DateLike = Union[date, datetime, str]

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_BARE_MONTH_RE = re.compile(r"^(?:\d{4}-)?(\d{1,2})$")


def _to_calendar_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(settings.property_timezone))
    return value.date()


def parse_iso_date(raw: str) -> date:
    """
    Parse an ISO-8601 date or timestamp into a calendar date.

    Raises ValueError for anything else.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("empty date")
    raw = raw.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    # Full timestamps, e.g. 2026-01-06T00:00:00Z
    return _to_calendar_date(datetime.fromisoformat(raw.replace("Z", "+00:00")))


def normalize_date(value: DateLike) -> date:
    """Reduce a date, datetime or ISO string to a plain calendar date."""
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return _to_calendar_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise ValueError(f"Unsupported date value: {value!r}")


def date_range(start: date, end: date) -> List[date]:
    """Dates from start (inclusive) to end (exclusive), ascending."""
    days = []
    current = start
    while current < end:
        days.append(current)
        current += timedelta(days=1)
    return days


def parse_year_month(raw: str) -> Tuple[int, int]:
    """
    Parse a YYYY-MM month parameter.

    Raises ValueError with a caller-facing message.
    """
    raw = (raw or "").strip()
    match = _YEAR_MONTH_RE.match(raw)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
    else:
        bare = _BARE_MONTH_RE.match(raw)
        if bare and not 1 <= int(bare.group(1)) <= 12:
            raise ValueError("Month must be between 01 and 12")
        raise ValueError("Invalid month format. Use YYYY-MM (e.g., 2026-01)")

    if not 1 <= month <= 12:
        raise ValueError("Month must be between 01 and 12")
    # The day after the last day must still be a representable date
    if year < 1 or year >= 9999:
        raise ValueError("Invalid month format. Use YYYY-MM (e.g., 2026-01)")
    return year, month


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Half-open [first day, first day of next month)."""
    days_in_month = calendar.monthrange(year, month)[1]
    start = date(year, month, 1)
    return start, start + timedelta(days=days_in_month)
