"""
Statistics calculation service for period-day observations.

This module provides the period/pad aggregator and the rolling-window
statistics built on it. All functions are read-only over the observations
they are given; "today" is always passed in by the caller.
"""
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from aws_lambda_powertools import Logger

from src.models.cycle import CycleRecord
from src.models.observation import DayObservation
from src.models.phase import Intensity
from src.models.report import (
    CurrentPeriodSummary,
    MonthlyPadUsage,
    PeriodAggregate,
    PeriodSummary,
)
from src.services.constants import CURRENT_PERIOD_WINDOW_DAYS, PERIOD_STATS_WINDOW_MONTHS
from src.services.utils import month_key, round_half_up, shift_months

logger = Logger()


def period_days_between(
    observations: Iterable[DayObservation],
    start: date,
    end: date
) -> List[DayObservation]:
    """Period-day observations within [start, end], oldest first."""
    return sorted(
        (obs for obs in observations if obs.is_period_day and start <= obs.date <= end),
        key=lambda obs: obs.date
    )


def intensity_distribution(observations: Iterable[DayObservation]) -> Dict[Intensity, int]:
    """Count of period days per recorded intensity; days without one are skipped."""
    return dict(Counter(obs.intensity for obs in observations if obs.intensity is not None))


def aggregate_period_days(
    observations: Iterable[DayObservation],
    start: date,
    end: date
) -> PeriodAggregate:
    """
    Summarize period days within a date range.

    Args:
        observations: Day observations in any order
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)

    Returns:
        PeriodAggregate with totals; an inverted range or a range without
        period days yields zeros

    Example:
        >>> aggregate = aggregate_period_days(observations, date(2024, 1, 1), date(2024, 1, 31))
        >>> aggregate.avg_pads_per_day
        3.0
    """
    period_days = period_days_between(observations, start, end)
    total_days = len(period_days)
    total_pads = sum(obs.pads_used for obs in period_days)

    return PeriodAggregate(
        start_date=start,
        end_date=end,
        total_period_days=total_days,
        total_pads=total_pads,
        avg_pads_per_day=total_pads / total_days if total_days else 0.0,
        intensity_distribution=intensity_distribution(period_days),
    )


def current_period_summary(
    observations: Iterable[DayObservation],
    today: date,
    window_days: int = CURRENT_PERIOD_WINDOW_DAYS
) -> CurrentPeriodSummary:
    """
    Summarize period days logged in the last `window_days` days.

    Days logged after `today` are included, matching how users pre-fill
    the remainder of an ongoing period.
    """
    window_start = today - timedelta(days=window_days)
    period_days = sorted(
        (obs for obs in observations if obs.is_period_day and obs.date >= window_start),
        key=lambda obs: obs.date
    )
    if not period_days:
        return CurrentPeriodSummary(window_start=window_start)

    total_pads = sum(obs.pads_used for obs in period_days)
    return CurrentPeriodSummary(
        window_start=window_start,
        period_start_date=period_days[0].date,
        period_end_date=period_days[-1].date,
        period_days=len(period_days),
        total_pads_used=total_pads,
        avg_pads_per_day=total_pads / len(period_days),
        details=period_days,
    )


def monthly_pad_usage(observations: Iterable[DayObservation], since: date) -> List[MonthlyPadUsage]:
    """Pads used and period days per month from `since` onwards, newest month first."""
    pads: Dict[str, int] = {}
    days: Dict[str, int] = {}
    for obs in observations:
        if obs.date < since:
            continue
        key = month_key(obs.date)
        pads[key] = pads.get(key, 0) + obs.pads_used
        days[key] = days.get(key, 0) + (1 if obs.is_period_day else 0)

    return [
        MonthlyPadUsage(month=key, pads_used=pads[key], period_days=days[key])
        for key in sorted(pads, reverse=True)
    ]


def calculate_period_statistics(
    observations: Sequence[DayObservation],
    today: date,
    months: int = PERIOD_STATS_WINDOW_MONTHS
) -> Dict:
    """
    Period statistics over the last `months` months.

    Returns:
        Dictionary containing:
        - summary: months tracked, period days, pads, average pads per period
          day and the first/last tracked dates
        - intensity_distribution: period days per intensity
        - monthly_stats: per-month pad usage, newest first
    """
    since = shift_months(today, -months)
    recent = [obs for obs in observations if obs.date >= since]
    period_days = [obs for obs in recent if obs.is_period_day]
    total_pads = sum(obs.pads_used for obs in recent)

    summary = {
        "months_tracked": len({month_key(obs.date) for obs in recent}),
        "period_days": len(period_days),
        "total_pads_used": total_pads,
        "avg_pads_per_day": (
            sum(obs.pads_used for obs in period_days) / len(period_days)
            if period_days else 0.0
        ),
        "first_tracked_date": min((obs.date for obs in recent), default=None),
        "last_tracked_date": max((obs.date for obs in recent), default=None),
    }

    logger.info("Period statistics calculated", extra={
        "since": str(since),
        "observations": len(recent),
        "period_days": len(period_days)
    })

    return {
        "summary": summary,
        "intensity_distribution": intensity_distribution(period_days),
        "monthly_stats": monthly_pad_usage(recent, since),
    }


def _dominant_intensity(period_days: Sequence[DayObservation]) -> Optional[Intensity]:
    counts = intensity_distribution(period_days)
    if not counts:
        return None
    return max(counts, key=counts.get)


def summarize_cycle_period(
    cycle: CycleRecord,
    observations: Iterable[DayObservation]
) -> PeriodSummary:
    """
    Period-day detail for one cycle.

    An open cycle is treated as a single day. The per-day average is taken
    over the recorded duration when the cycle has ended, otherwise it is the
    total pad count.
    """
    end = cycle.end_date or cycle.start_date
    period_days = period_days_between(observations, cycle.start_date, end)
    total_pads = sum(obs.pads_used for obs in period_days)
    duration = cycle.duration or 1

    if total_pads and cycle.end_date is not None:
        average = round_half_up(total_pads / duration, 2)
    else:
        average = float(total_pads)

    return PeriodSummary(
        start_date=cycle.start_date,
        end_date=cycle.end_date,
        duration_days=duration,
        period_days=len(period_days),
        total_pads_used=total_pads,
        average_pads_per_day=average,
        dominant_intensity=_dominant_intensity(period_days),
        notes=cycle.notes,
        period_dates=[obs.date for obs in period_days],
    )


def calculate_period_summaries(
    cycles: Sequence[CycleRecord],
    observations: Sequence[DayObservation],
    start: Optional[date] = None,
    end: Optional[date] = None
) -> Dict:
    """
    Per-cycle period summaries plus overall totals.

    Args:
        cycles: Cycle records ordered newest first
        observations: Day observations
        start: Optional lower bound on cycle start dates
        end: Optional upper bound on cycle end dates (open cycles use their start)

    Returns:
        Dictionary with "periods" (list of PeriodSummary) and "statistics"
    """
    selected = [
        cycle for cycle in cycles
        if (start is None or cycle.start_date >= start)
        and (end is None or (cycle.end_date or cycle.start_date) <= end)
    ]
    periods = [summarize_cycle_period(cycle, observations) for cycle in selected]

    total_periods = len(periods)
    total_pads = sum(period.total_pads_used for period in periods)
    total_days = sum(period.duration_days for period in periods)

    return {
        "periods": periods,
        "statistics": {
            "total_periods": total_periods,
            "total_period_days": total_days,
            "total_pads_used": total_pads,
            "average_pads_per_period": round_half_up(total_pads / total_periods, 2) if total_periods else 0,
            "average_period_length": round_half_up(total_days / total_periods, 2) if total_periods else 0,
        },
    }
