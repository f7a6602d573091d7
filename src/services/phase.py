"""
Phase classification service.

Classifies calendar dates into Period, Fertile, Ovulation or None using a
fixed 14-day luteal phase model, and sweeps whole months for calendar views.

Typical usage:
    phase = classify(date(2024, 1, 14), date(2024, 1, 1), 28, 5)
    days = build_month_calendar(2024, 1, profile.to_parameters())
"""
from datetime import date
from typing import List, Tuple

from aws_lambda_powertools import Logger

from src.models.phase import CalendarDay, CalendarPhase
from src.models.profile import ProfileParameters
from src.services.constants import (
    FERTILE_DAYS_AFTER_OVULATION,
    FERTILE_DAYS_BEFORE_OVULATION,
    LUTEAL_PHASE_DAYS,
)
from src.services.exceptions import InvalidRangeError
from src.services.utils import iter_dates, month_bounds

logger = Logger()


def _check_cycle_length(cycle_length: int) -> None:
    if cycle_length < 1:
        raise InvalidRangeError(f"Cycle length must be at least 1 day, got {cycle_length}")


def day_of_cycle(target_date: date, last_period_start: date, cycle_length: int) -> int:
    """
    1-based position of a date within its cycle.

    Dates before last_period_start are folded back into the cycle with a floor
    modulo, so the result always lies in [1, cycle_length].

    Raises:
        InvalidRangeError: If cycle_length is below 1

    Example:
        >>> day_of_cycle(date(2024, 1, 14), date(2024, 1, 1), 28)
        14
        >>> day_of_cycle(date(2023, 12, 31), date(2024, 1, 1), 28)
        28
    """
    _check_cycle_length(cycle_length)
    days_since_last_period = (target_date - last_period_start).days
    return days_since_last_period % cycle_length + 1


def ovulation_day(cycle_length: int) -> int:
    """Cycle day on which ovulation is expected."""
    return cycle_length - LUTEAL_PHASE_DAYS


def fertile_window(cycle_length: int) -> Tuple[int, int]:
    """Inclusive (first, last) cycle days of the fertile window."""
    ovulation = ovulation_day(cycle_length)
    return ovulation - FERTILE_DAYS_BEFORE_OVULATION, ovulation + FERTILE_DAYS_AFTER_OVULATION


def is_ovulation_day(cycle_day: int, cycle_length: int) -> bool:
    return cycle_day == ovulation_day(cycle_length)


def is_fertile_day(cycle_day: int, cycle_length: int) -> bool:
    """True inside the fertile window, including the ovulation day itself."""
    start, end = fertile_window(cycle_length)
    return start <= cycle_day <= end


def classify_cycle_day(cycle_day: int, cycle_length: int, bleeding_duration: int) -> CalendarPhase:
    """
    Label a cycle day. Period wins over everything, Ovulation wins over Fertile.
    """
    if cycle_day <= bleeding_duration:
        return CalendarPhase.PERIOD
    if is_ovulation_day(cycle_day, cycle_length):
        return CalendarPhase.OVULATION
    if is_fertile_day(cycle_day, cycle_length):
        return CalendarPhase.FERTILE
    return CalendarPhase.NONE


def classify(
    target_date: date,
    last_period_start: date,
    cycle_length: int,
    bleeding_duration: int
) -> CalendarPhase:
    """
    Classify a calendar date relative to the most recent period start.

    Args:
        target_date: Date to classify (may precede last_period_start)
        last_period_start: First day of the reference period
        cycle_length: Cycle length in days, at least 1
        bleeding_duration: Expected period length in days

    Returns:
        Exactly one CalendarPhase label

    Raises:
        InvalidRangeError: If cycle_length is below 1

    Example:
        >>> classify(date(2024, 1, 14), date(2024, 1, 1), 28, 5)
        <CalendarPhase.OVULATION: 'Ovulation'>
    """
    cycle_day = day_of_cycle(target_date, last_period_start, cycle_length)
    return classify_cycle_day(cycle_day, cycle_length, bleeding_duration)


def describe_day(target_date: date, params: ProfileParameters) -> CalendarDay:
    """
    Classify a date and expose the fertile/ovulation flags independently.

    Raises:
        ValueError: If params has no last period date
    """
    if params.last_period_date is None:
        raise ValueError("Profile has no last period date")

    cycle_day = day_of_cycle(target_date, params.last_period_date, params.cycle_length)
    return CalendarDay(
        date=target_date,
        day_of_cycle=cycle_day,
        phase=classify_cycle_day(cycle_day, params.cycle_length, params.bleeding_duration),
        is_fertile=is_fertile_day(cycle_day, params.cycle_length),
        is_ovulation=is_ovulation_day(cycle_day, params.cycle_length),
    )


def classify_range(start: date, end: date, params: ProfileParameters) -> List[CalendarDay]:
    """
    Classify every date in [start, end].

    Each date is classified on its own; an inverted range yields an empty list.
    """
    return [describe_day(day, params) for day in iter_dates(start, end)]


def build_month_calendar(
    year: int,
    month: int,
    params: ProfileParameters,
    include_unmarked: bool = False
) -> List[CalendarDay]:
    """
    Annotate a calendar month with predicted phases.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        params: Cycle parameters; without a last period date nothing is marked
        include_unmarked: Keep days classified as None in the output

    Returns:
        Classified days in date order
    """
    if params.last_period_date is None:
        logger.info("No last period date, calendar left unmarked", extra={
            "year": year,
            "month": month
        })
        return []

    month_start, month_end = month_bounds(year, month)
    days = classify_range(month_start, month_end, params)
    if include_unmarked:
        return days
    return [day for day in days if day.phase != CalendarPhase.NONE]
