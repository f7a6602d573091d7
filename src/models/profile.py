"""
Profile model definitions.

UserProfile is what the user edits; ProfileParameters is the narrow view the
cycle core consumes.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.models.phase import FlowAmount, FlowRegularity
from src.services.constants import DEFAULT_BLEEDING_DURATION, DEFAULT_CYCLE_LENGTH


class ProfileParameters(BaseModel):
    """
    Cycle parameters used as classifier defaults.
    """
    cycle_length: int = Field(DEFAULT_CYCLE_LENGTH, ge=1, le=365)
    bleeding_duration: int = Field(DEFAULT_BLEEDING_DURATION, ge=1, le=365)
    last_period_date: Optional[date] = None


class UserProfile(BaseModel):
    """
    Full user profile as submitted from the profile screen.
    """
    age: int = Field(..., ge=0, le=120)
    weight: Optional[float] = Field(None, ge=0, le=500)
    height: Optional[float] = Field(None, ge=0, le=300)
    cycle_length: Optional[int] = Field(None, ge=1, le=365)
    bleeding_duration: Optional[int] = Field(None, ge=1, le=365)
    last_period_date: Optional[date] = None
    age_at_menarche: Optional[int] = Field(None, ge=0, le=30)
    flow_regularity: Optional[FlowRegularity] = None
    flow_amount: Optional[FlowAmount] = None
    period_interval: Optional[int] = Field(None, ge=0, le=365)

    @field_validator("flow_regularity", mode="before")
    @classmethod
    def parse_flow_regularity(cls, value):
        return FlowRegularity.parse(value) if value else None

    @field_validator("flow_amount", mode="before")
    @classmethod
    def parse_flow_amount(cls, value):
        return FlowAmount.parse(value) if value else None

    def to_parameters(self) -> ProfileParameters:
        """Narrow the profile to cycle parameters, filling documented defaults."""
        return ProfileParameters(
            cycle_length=self.cycle_length or DEFAULT_CYCLE_LENGTH,
            bleeding_duration=self.bleeding_duration or DEFAULT_BLEEDING_DURATION,
            last_period_date=self.last_period_date,
        )

    def summary_line(self) -> str:
        """One-line description used in exported reports."""
        def show(value):
            if value is None:
                return "-"
            return getattr(value, "value", value)

        return (
            f"Age: {show(self.age)}, Weight: {show(self.weight)}, "
            f"Height: {show(self.height)} cm, Cycle Length: {show(self.cycle_length)} days, "
            f"Bleeding Duration: {show(self.bleeding_duration)} days, "
            f"Flow Regularity: {show(self.flow_regularity)}, Flow Amount: {show(self.flow_amount)}"
        )
