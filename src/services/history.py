"""
Service module for a user's recorded cycle history.

CycleHistory is an in-memory snapshot of one user's cycle records, day
observations and symptom logs. It enforces the uniqueness rules (one cycle
per start date, one observation per day) and the period-field cascade on
observation updates. Persisting the changes it reports is left to the caller.

Typical usage:
    history = repository.load_history(user_id)
    observation, new_cycle = history.record_observation(observation)
    recent = history.most_recent_first(limit=6)
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from aws_lambda_powertools import Logger

from src.models.cycle import CycleRecord
from src.models.observation import DayObservation, DayObservationUpdate, SymptomLog
from src.models.phase import Intensity
from src.services.constants import DEFAULT_INTENSITY, OPEN_PERIOD_WINDOW_DAYS
from src.services.exceptions import (
    CycleNotFoundError,
    DuplicateCycleError,
    InvalidRangeError,
    ObservationNotFoundError,
)
from src.services.utils import iter_dates

logger = Logger()


@dataclass
class TrackedPeriod:
    """Outcome of marking a run of days as period days."""
    start_date: date
    end_date: date
    observations: List[DayObservation] = field(default_factory=list)
    created_cycle: Optional[CycleRecord] = None
    pads_per_day: int = 0

    @property
    def days(self) -> List[date]:
        return [observation.date for observation in self.observations]

    @property
    def days_count(self) -> int:
        return len(self.observations)

    @property
    def total_pads(self) -> int:
        return self.pads_per_day * self.days_count


class CycleHistory:
    """Ordered, per-user collection of cycles, observations and symptoms."""

    def __init__(
        self,
        cycles: Iterable[CycleRecord] = (),
        observations: Iterable[DayObservation] = (),
        symptoms: Iterable[SymptomLog] = ()
    ):
        self._cycles: Dict[date, CycleRecord] = {}
        self._observations: Dict[date, DayObservation] = {}
        self._symptoms: List[SymptomLog] = list(symptoms)

        for record in cycles:
            self.add_cycle(record)
        for observation in observations:
            self._observations[observation.date] = observation

    # Cycles

    @property
    def cycles(self) -> List[CycleRecord]:
        """Cycle records ordered oldest first."""
        return [self._cycles[start] for start in sorted(self._cycles)]

    def most_recent_first(self, limit: Optional[int] = None) -> List[CycleRecord]:
        """Cycle records ordered newest first, optionally truncated."""
        ordered = [self._cycles[start] for start in sorted(self._cycles, reverse=True)]
        return ordered if limit is None else ordered[:limit]

    def latest_cycle(self) -> Optional[CycleRecord]:
        if not self._cycles:
            return None
        return self._cycles[max(self._cycles)]

    def get_cycle(self, start_date: date) -> Optional[CycleRecord]:
        return self._cycles.get(start_date)

    def add_cycle(self, record: CycleRecord) -> CycleRecord:
        """
        Add a cycle record.

        Raises:
            DuplicateCycleError: If a cycle already starts on the same date
        """
        if record.start_date in self._cycles:
            raise DuplicateCycleError(f"A cycle starting on {record.start_date} already exists")
        self._cycles[record.start_date] = record
        return record

    def amend_cycle(self, start_date: date, /, **changes) -> CycleRecord:
        """
        Replace end_date and/or notes of an existing cycle.

        Raises:
            CycleNotFoundError: If no cycle starts on start_date
            ValidationError: If the new end date precedes the start date
        """
        record = self._cycles.get(start_date)
        if record is None:
            raise CycleNotFoundError(f"No cycle starts on {start_date}")
        amended = record.amend(**changes)
        self._cycles[start_date] = amended
        return amended

    def cycle_covering(self, day: date) -> Optional[CycleRecord]:
        """
        The cycle whose bleeding phase includes `day`, if any.

        A cycle with an end date covers [start, end]; an open cycle covers the
        OPEN_PERIOD_WINDOW_DAYS days starting at its start date.
        """
        for record in self.most_recent_first():
            if record.start_date > day:
                continue
            if record.end_date is not None:
                return record if day <= record.end_date else None
            window_end = record.start_date + timedelta(days=OPEN_PERIOD_WINDOW_DAYS - 1)
            return record if day <= window_end else None
        return None

    def cycle_for_day(self, day: date) -> Optional[CycleRecord]:
        """Most recent cycle starting on or before `day`."""
        for record in self.most_recent_first():
            if record.start_date <= day:
                return record
        return None

    # Observations

    @property
    def observations(self) -> List[DayObservation]:
        """Day observations ordered oldest first."""
        return [self._observations[day] for day in sorted(self._observations)]

    def get_observation(self, day: date) -> Optional[DayObservation]:
        return self._observations.get(day)

    def observations_between(self, start: date, end: date) -> List[DayObservation]:
        """Observations within [start, end], oldest first."""
        return [obs for obs in self.observations if start <= obs.date <= end]

    def _start_cycle_if_uncovered(self, observation: DayObservation) -> Optional[CycleRecord]:
        if not observation.is_period_day or self.cycle_covering(observation.date) is not None:
            return None
        created = self.add_cycle(CycleRecord(start_date=observation.date))
        logger.info("Period day started a new cycle", extra={
            "start_date": str(observation.date)
        })
        return created

    def record_observation(self, observation: DayObservation) -> Tuple[DayObservation, Optional[CycleRecord]]:
        """
        Create or replace the observation for its date.

        A period day that no existing cycle covers starts a new cycle. Cycles
        are never re-keyed: a period day logged just before an existing
        cycle's start date starts its own cycle rather than moving the later
        one back.

        Returns:
            Tuple of (stored observation, newly created cycle or None)
        """
        self._observations[observation.date] = observation
        return observation, self._start_cycle_if_uncovered(observation)

    def update_observation(
        self,
        day: date,
        update: DayObservationUpdate
    ) -> Tuple[DayObservation, bool, Optional[CycleRecord]]:
        """
        Apply a partial update to an existing observation.

        Only fields present in the update are applied. Turning a period day off
        resets pads, intensity and period notes. Pads and intensity are ignored
        when the same update turns the period day off. Turning a day into a
        period day starts a cycle under the same rule as record_observation.

        Returns:
            Tuple of (updated observation, whether any field was supplied,
            newly created cycle or None)

        Raises:
            ObservationNotFoundError: If nothing is recorded for `day`
        """
        current = self._observations.get(day)
        if current is None:
            raise ObservationNotFoundError(f"No observation recorded for {day}")

        supplied = update.model_fields_set
        if not supplied:
            return current, False, None

        values = current.model_dump()
        for name in ("content", "mood", "notes", "is_period_day"):
            if name in supplied:
                values[name] = getattr(update, name)

        period_day_requested = update.is_period_day if "is_period_day" in supplied else None
        if period_day_requested is not False:
            if "pads_used" in supplied:
                values["pads_used"] = max(update.pads_used or 0, 0)
            if "intensity" in supplied:
                values["intensity"] = update.intensity or Intensity(DEFAULT_INTENSITY)

        updated = DayObservation(**values)
        self._observations[day] = updated
        return updated, True, self._start_cycle_if_uncovered(updated)

    def track_period(
        self,
        start_date: date,
        end_date: Optional[date] = None,
        pads_used: int = 0,
        intensity: Optional[Intensity] = None,
        notes: Optional[str] = None
    ) -> TrackedPeriod:
        """
        Mark every day from start_date to end_date as a period day.

        Existing daily content and mood are kept; period fields are replaced.
        A cycle starting on start_date is created unless one already exists.

        Raises:
            InvalidRangeError: If end_date precedes start_date
        """
        end_date = end_date or start_date
        if end_date < start_date:
            raise InvalidRangeError("End date cannot be before start date")

        pads_used = pads_used or 0
        intensity = intensity or Intensity(DEFAULT_INTENSITY)
        result = TrackedPeriod(start_date=start_date, end_date=end_date, pads_per_day=pads_used)

        for day in iter_dates(start_date, end_date):
            existing = self._observations.get(day)
            observation = DayObservation(
                date=day,
                is_period_day=True,
                pads_used=pads_used,
                intensity=intensity,
                notes=notes,
                mood=existing.mood if existing else None,
                content=existing.content if existing else None,
            )
            self._observations[day] = observation
            result.observations.append(observation)

        if start_date not in self._cycles:
            result.created_cycle = self.add_cycle(CycleRecord(
                start_date=start_date,
                end_date=end_date,
                notes=notes or f"Period tracked: {pads_used} pads used",
            ))

        logger.info("Period tracked", extra={
            "start_date": str(start_date),
            "end_date": str(end_date),
            "days_count": result.days_count,
            "cycle_created": result.created_cycle is not None
        })
        return result

    # Symptoms

    @property
    def symptoms(self) -> List[SymptomLog]:
        """Symptom logs ordered oldest first."""
        return sorted(self._symptoms, key=lambda s: s.date)

    def add_symptom(self, symptom: SymptomLog) -> SymptomLog:
        self._symptoms.append(symptom)
        return symptom
