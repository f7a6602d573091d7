"""
Observation model definitions for daily notes, period days and symptoms.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from src.models.phase import Intensity


def blank_to_none(value):
    """Treat empty or whitespace-only strings as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DayObservation(BaseModel):
    """
    Everything a user recorded for a single calendar day.

    Period fields (pads_used, intensity, notes) only carry meaning on a period
    day; whenever is_period_day is false they are reset to 0/None.
    """
    date: date
    is_period_day: bool = False
    pads_used: int = Field(0, ge=0)
    intensity: Optional[Intensity] = None
    notes: Optional[str] = None
    mood: Optional[str] = None
    content: Optional[str] = None

    @field_validator("intensity", mode="before")
    @classmethod
    def parse_intensity(cls, value):
        value = blank_to_none(value)
        return None if value is None else Intensity.parse(value)

    @field_validator("notes", "mood", "content", mode="before")
    @classmethod
    def strip_blank_text(cls, value):
        return blank_to_none(value)

    @model_validator(mode="after")
    def reset_period_fields(self) -> "DayObservation":
        if not self.is_period_day:
            self.pads_used = 0
            self.intensity = None
            self.notes = None
        return self


class DayObservationUpdate(BaseModel):
    """
    Partial update of a day observation.

    Only fields explicitly present in the payload are applied; use
    model_fields_set to tell "not supplied" from "supplied as null".
    """
    is_period_day: Optional[bool] = None
    pads_used: Optional[int] = None
    intensity: Optional[Intensity] = None
    notes: Optional[str] = None
    mood: Optional[str] = None
    content: Optional[str] = None

    @field_validator("pads_used")
    @classmethod
    def check_pads(cls, value):
        if value is not None and value < 0:
            raise ValueError("Pads used must be 0 or more")
        return value

    @field_validator("intensity", mode="before")
    @classmethod
    def parse_intensity(cls, value):
        value = blank_to_none(value)
        return None if value is None else Intensity.parse(value)

    @field_validator("notes", "mood", "content", mode="before")
    @classmethod
    def strip_blank_text(cls, value):
        return blank_to_none(value)


class SymptomLog(BaseModel):
    """
    A symptom recorded on a given day, optionally linked to a cycle.
    """
    symptom_id: Optional[str] = None
    date: date
    symptom_type: str = Field(..., min_length=1)
    severity: Optional[str] = None
    notes: Optional[str] = None
    cycle_start_date: Optional[date] = None

    @field_validator("severity", "notes", mode="before")
    @classmethod
    def strip_blank_text(cls, value):
        return blank_to_none(value)
