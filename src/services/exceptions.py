"""
Service-level exceptions.

This module contains exceptions that can be raised by the cycle core and the
services built on top of it. Validation-type errors also derive from
ValueError so pydantic validators surface them as ValidationError.
"""

class CycleCoreError(Exception):
    """Base exception for cycle computation errors."""
    pass

class InsufficientHistoryError(CycleCoreError):
    """Raised when a forecast is requested with too few recorded cycles."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(
            f"Not enough cycle data for prediction: {available} cycle(s) recorded, "
            f"{required} required"
        )

class InvalidRangeError(CycleCoreError, ValueError):
    """Raised when a date range or cycle length is non-positive or inverted."""
    pass

class InvalidEnumValueError(CycleCoreError, ValueError):
    """Raised when free text does not normalize to a known enum member."""

    def __init__(self, enum_name: str, value):
        self.enum_name = enum_name
        self.value = value
        super().__init__(f"Invalid {enum_name} value: {value!r}")

class InvalidTimezoneError(CycleCoreError, ValueError):
    """Raised when a timezone name cannot be resolved."""
    pass

class DuplicateCycleError(CycleCoreError):
    """Raised when a cycle already exists for the given start date."""
    pass

class CycleNotFoundError(CycleCoreError):
    """Raised when no cycle starts on the given date."""
    pass

class ObservationNotFoundError(CycleCoreError):
    """Raised when no day observation exists for the given date."""
    pass
