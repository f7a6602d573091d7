"""
Cycle model definitions for recorded and predicted menstrual cycles.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from src.services.exceptions import InvalidRangeError


class CycleRecord(BaseModel):
    """
    One observed menstrual cycle, identified by its start date.

    Only end_date and notes may be amended after creation; see amend().
    """
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_date_order(self) -> "CycleRecord":
        if self.end_date is not None and self.end_date < self.start_date:
            raise InvalidRangeError(
                f"End date {self.end_date} cannot be before start date {self.start_date}"
            )
        return self

    @property
    def duration(self) -> Optional[int]:
        """Inclusive length in days, or None while the cycle has no end date."""
        if self.end_date is None:
            return None
        return (self.end_date - self.start_date).days + 1

    def amend(self, **changes) -> "CycleRecord":
        """
        Return a copy with end_date and/or notes replaced.

        Raises:
            ValueError: If any other field is supplied
            ValidationError: If the new end date precedes the start date
        """
        unknown = set(changes) - {"end_date", "notes"}
        if unknown:
            raise ValueError(f"Cannot amend fields: {', '.join(sorted(unknown))}")
        return CycleRecord(**{**self.model_dump(), **changes})


class Prediction(BaseModel):
    """
    A projected future cycle. Derived on demand, never persisted.
    """
    cycle_number: int = Field(..., ge=1)
    predicted_start: date
    predicted_end: date
    cycle_length: int
