"""
Month-year handling for subscription dates.

Dates travel as ``MM-YYYY`` text and are stored as the first instant of
the month in UTC.
"""

import calendar
import re
from datetime import UTC, datetime

from .exceptions import InvalidDateError

MONTH_YEAR_FORMAT = "MM-YYYY"

_MONTH_YEAR_RE = re.compile(r"([0-9]{2})-([0-9]{4})")


def parse_month_year(text: str, field: str = "date") -> datetime:
    """Parse ``MM-YYYY`` into the first instant of that month (UTC)."""
    match = _MONTH_YEAR_RE.fullmatch(text or "")
    if match is None:
        raise InvalidDateError(field, text)

    month, year = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidDateError(field, text)

    return datetime(year, month, 1, tzinfo=UTC)


def format_month_year(value: datetime) -> str:
    """Render a datetime as ``MM-YYYY``."""
    return f"{value.month:02d}-{value.year:04d}"


def month_start(value: datetime) -> datetime:
    """Normalize to the first instant of the month in UTC.

    SQLite hands timestamps back without tzinfo, so naive values are
    taken to be UTC already.
    """
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return datetime(value.year, value.month, 1, tzinfo=UTC)


def month_end(value: datetime) -> datetime:
    """Last second of the month containing ``value`` (UTC)."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return datetime(value.year, value.month, last_day, 23, 59, 59, tzinfo=UTC)


def month_window(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Inclusive whole-month window from the start month to the end month."""
    return month_start(start), month_end(end)
