"""
Cycle predictor.

Projects future cycles forward from the most recent cycle start at a fixed
average length.
"""
from datetime import timedelta
from typing import Iterator, List

from src.models.cycle import CycleRecord, Prediction
from src.services.constants import DEFAULT_PERIOD_LENGTH, PREDICTION_COUNT
from src.services.exceptions import InvalidRangeError


def iter_predictions(
    most_recent_cycle: CycleRecord,
    avg_cycle_length: int,
    count: int = PREDICTION_COUNT,
    period_length: int = DEFAULT_PERIOD_LENGTH
) -> Iterator[Prediction]:
    """
    Lazily yield the next `count` predicted cycles.

    The i-th prediction (0-based) starts (i + 1) * avg_cycle_length days after
    the most recent cycle start and ends period_length - 1 days later.

    Raises:
        InvalidRangeError: If avg_cycle_length or period_length is below 1
    """
    if avg_cycle_length < 1:
        raise InvalidRangeError(f"Average cycle length must be at least 1, got {avg_cycle_length}")
    if period_length < 1:
        raise InvalidRangeError(f"Period length must be at least 1, got {period_length}")

    step = timedelta(days=avg_cycle_length)
    period_span = timedelta(days=period_length - 1)
    predicted_start = most_recent_cycle.start_date
    for index in range(count):
        predicted_start += step
        yield Prediction(
            cycle_number=index + 1,
            predicted_start=predicted_start,
            predicted_end=predicted_start + period_span,
            cycle_length=avg_cycle_length,
        )


def predict_cycles(
    most_recent_cycle: CycleRecord,
    avg_cycle_length: int,
    count: int = PREDICTION_COUNT,
    period_length: int = DEFAULT_PERIOD_LENGTH
) -> List[Prediction]:
    """
    Predict the next `count` cycles.

    Example:
        >>> predictions = predict_cycles(CycleRecord(start_date=date(2024, 1, 1)), 28, count=3)
        >>> [p.predicted_start for p in predictions]
        [datetime.date(2024, 1, 29), datetime.date(2024, 2, 26), datetime.date(2024, 3, 25)]
    """
    return list(iter_predictions(most_recent_cycle, avg_cycle_length, count, period_length))
