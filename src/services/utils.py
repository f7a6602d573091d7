"""
Shared utility functions for cycle-related services.

These utilities handle the date arithmetic that the classifier, the
aggregator and the report builders all rely on.
"""
import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.services.exceptions import InvalidRangeError, InvalidTimezoneError


def iter_dates(start: date, end: date) -> Iterator[date]:
    """
    Yield every date from start to end inclusive.

    An inverted range (start > end) yields nothing.

    Example:
        >>> list(iter_dates(date(2024, 1, 30), date(2024, 2, 1)))
        [datetime.date(2024, 1, 30), datetime.date(2024, 1, 31), datetime.date(2024, 2, 1)]
    """
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """
    First and last day of a calendar month.

    Raises:
        InvalidRangeError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise InvalidRangeError(f"Month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_months(day: date, months: int) -> date:
    """Move a date by whole months, clamping to the last day of the target month."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def month_key(day: date) -> str:
    """YYYY-MM bucket for a date."""
    return day.strftime("%Y-%m")


def round_half_up(value: float, places: int = 0):
    """
    Round halves away from zero instead of Python's banker's rounding.

    Returns an int when places is 0, a float otherwise.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def resolve_timezone(name: str) -> ZoneInfo:
    """
    Look up an IANA timezone by name.

    Raises:
        InvalidTimezoneError: If the name is unknown
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidTimezoneError(f"Unknown timezone: {name!r}") from None


def today_in(timezone: str, now: datetime = None) -> date:
    """
    Current calendar date in the given timezone.

    Args:
        timezone: IANA timezone name, e.g. "Asia/Kolkata"
        now: Optional aware datetime to convert instead of the wall clock
    """
    tz = resolve_timezone(timezone)
    if now is None:
        return datetime.now(tz).date()
    return now.astimezone(tz).date()
