"""
Report model definitions returned by the statistics service.
"""
from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from src.models.observation import DayObservation
from src.models.phase import Intensity


class PeriodAggregate(BaseModel):
    """
    Totals over the period days of a date range.
    """
    start_date: date
    end_date: date
    total_period_days: int = 0
    total_pads: int = 0
    avg_pads_per_day: float = 0.0
    intensity_distribution: Dict[Intensity, int] = Field(default_factory=dict)


class CurrentPeriodSummary(BaseModel):
    """
    Period days logged within the rolling window ending today, each day
    listed in `details` in date order.
    """
    window_start: date
    period_start_date: Optional[date] = None
    period_end_date: Optional[date] = None
    period_days: int = 0
    total_pads_used: int = 0
    avg_pads_per_day: float = 0.0
    details: List[DayObservation] = Field(default_factory=list)


class MonthlyPadUsage(BaseModel):
    month: str
    pads_used: int
    period_days: int


class PeriodSummary(BaseModel):
    """
    Period-day detail for one recorded cycle.
    """
    start_date: date
    end_date: Optional[date] = None
    duration_days: int
    period_days: int
    total_pads_used: int
    average_pads_per_day: float
    dominant_intensity: Optional[Intensity] = None
    notes: Optional[str] = None
    period_dates: List[date] = Field(default_factory=list)
