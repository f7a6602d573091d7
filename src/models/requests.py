"""
Request payload models.

Each handler validates its payload once through one of these models;
services receive typed values and never re-check them. Clients send
camelCase keys, snake_case is accepted as well.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.models.observation import DayObservation, blank_to_none
from src.models.phase import Intensity
from src.models.profile import UserProfile
from src.services.constants import (
    DEFAULT_INTENSITY,
    DEFAULT_PERIOD_LENGTH,
    PREDICTION_COUNT,
)
from src.services.exceptions import InvalidRangeError


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ObservationRequest(RequestModel):
    """
    Create or replace the observation for a day.

    Defaults: not a period day, 0 pads, "medium" intensity on period days.
    """
    date: date
    content: Optional[str] = None
    mood: Optional[str] = None
    is_period_day: bool = False
    pads_used: int = Field(0, ge=0)
    period_intensity: Intensity = Intensity(DEFAULT_INTENSITY)
    period_notes: Optional[str] = None

    @field_validator("period_intensity", mode="before")
    @classmethod
    def parse_intensity(cls, value):
        value = blank_to_none(value)
        return Intensity(DEFAULT_INTENSITY) if value is None else Intensity.parse(value)

    def to_observation(self) -> DayObservation:
        return DayObservation(
            date=self.date,
            is_period_day=self.is_period_day,
            pads_used=self.pads_used,
            intensity=self.period_intensity,
            notes=self.period_notes,
            mood=self.mood,
            content=self.content,
        )


class TrackPeriodRequest(RequestModel):
    """Mark a run of days as period days; end_date defaults to start_date."""
    start_date: date
    end_date: Optional[date] = None
    pads_used: int = Field(0, ge=0)
    intensity: Optional[Intensity] = None
    notes: Optional[str] = None

    @field_validator("intensity", mode="before")
    @classmethod
    def parse_intensity(cls, value):
        value = blank_to_none(value)
        return None if value is None else Intensity.parse(value)


class CycleRequest(RequestModel):
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None


class SymptomRequest(RequestModel):
    date: date
    symptom_type: str = Field(..., min_length=1)
    severity: Optional[str] = None
    notes: Optional[str] = None
    cycle_start_date: Optional[date] = None


class CalendarQuery(RequestModel):
    year: int = Field(..., ge=1900, le=9999)
    month: int = Field(..., ge=1, le=12)


class ForecastRequest(RequestModel):
    count: int = Field(PREDICTION_COUNT, ge=1, le=120)
    period_length: int = Field(DEFAULT_PERIOD_LENGTH, ge=1, le=365)


class DateRangeQuery(RequestModel):
    """Optional inclusive date bounds; an inverted range is rejected."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_order(self) -> "DateRangeQuery":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise InvalidRangeError("Start date cannot be after end date")
        return self


class ProfileRequest(RequestModel, UserProfile):
    """Profile payload; enum fields are case-normalized by UserProfile."""

    def to_profile(self) -> UserProfile:
        return UserProfile(**self.model_dump())


class CustomReportQuery(DateRangeQuery):
    """Date-bounded report with per-section switches, all on by default."""
    include_notes: bool = True
    include_symptoms: bool = True
    include_cycles: bool = True
    include_periods: bool = True

    @model_validator(mode="after")
    def require_bounds(self) -> "CustomReportQuery":
        if self.start_date is None or self.end_date is None:
            raise ValueError("Start date and end date are required")
        return self
