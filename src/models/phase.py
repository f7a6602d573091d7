"""
Enumerations for calendar phases and user-entered categorical values.
"""
from enum import Enum
from datetime import date
from pydantic import BaseModel

from src.services.exceptions import InvalidEnumValueError


class NormalizedEnum(str, Enum):
    """
    String enum with an explicit parse-and-normalize step.

    Free text coming from clients is stripped and lower-cased before lookup;
    anything that does not match a member raises InvalidEnumValueError.
    """

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidEnumValueError(cls.__name__, value)
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidEnumValueError(cls.__name__, value) from None


class CalendarPhase(str, Enum):
    """
    Label assigned to a calendar date by the phase classifier.
    """
    PERIOD = "Period"
    FERTILE = "Fertile"
    OVULATION = "Ovulation"
    NONE = "None"


class Intensity(NormalizedEnum):
    """Flow intensity recorded on a period day."""
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class FlowRegularity(NormalizedEnum):
    """Self-reported regularity of the user's cycle."""
    REGULAR = "regular"
    USUALLY_REGULAR = "usually_regular"
    USUALLY_IRREGULAR = "usually_irregular"
    ALWAYS_IRREGULAR = "always_irregular"


class FlowAmount(NormalizedEnum):
    """Self-reported typical flow amount."""
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


class SymptomPhase(str, Enum):
    """Coarse cycle phase used to bucket symptom logs."""
    MENSTRUATION = "menstruation"
    FOLLICULAR = "follicular"
    LUTEAL = "luteal"
    UNKNOWN = "unknown"


class CalendarDay(BaseModel):
    """
    A single classified calendar date.
    """
    date: date
    day_of_cycle: int
    phase: CalendarPhase
    is_fertile: bool = False
    is_ovulation: bool = False
