"""
Service module for cycle length estimation and forecasting.

This module turns a user's recorded cycle start dates into an average cycle
length and a forecast of upcoming cycles.

Typical usage:
    history = repository.load_history(user_id)
    forecast = forecast_cycles(history.most_recent_first())
    for prediction in forecast.predictions:
        print(prediction.predicted_start)
"""
from typing import List, Optional, Sequence

from aws_lambda_powertools import Logger
from pydantic import BaseModel

from src.models.cycle import CycleRecord, Prediction
from src.services.constants import (
    DEFAULT_CYCLE_LENGTH,
    DEFAULT_PERIOD_LENGTH,
    MIN_CYCLES_FOR_PREDICTION,
    PREDICTION_COUNT,
    PREDICTION_WINDOW,
)
from src.services.exceptions import InsufficientHistoryError
from src.services.prediction import predict_cycles
from src.services.utils import round_half_up

logger = Logger()


class CycleForecast(BaseModel):
    """Average cycle length plus the predictions derived from it."""
    average_cycle_length: int
    cycles_used: int
    predictions: List[Prediction]


def average_cycle_length(history: Sequence[CycleRecord]) -> Optional[int]:
    """
    Rounded mean gap between consecutive cycle starts.

    Args:
        history: Cycle records ordered newest first

    Returns:
        Average gap in days, or None with fewer than two records
    """
    if len(history) < 2:
        return None

    total_days = sum(
        (newer.start_date - older.start_date).days
        for newer, older in zip(history, history[1:])
    )
    pair_count = max(1, len(history) - 1)
    return round_half_up(total_days / pair_count)


def estimate_cycle_length(history: Sequence[CycleRecord]) -> int:
    """
    Estimate the user's cycle length from recorded start dates.

    Only start dates are used, so cycles without an end date still count.

    Args:
        history: Cycle records ordered newest first

    Returns:
        Estimated cycle length; the 28-day default when fewer than two records
        are given or the estimate is not positive

    Example:
        >>> estimate_cycle_length([])
        28
    """
    estimate = average_cycle_length(history)
    if not estimate or estimate < 1:
        return DEFAULT_CYCLE_LENGTH
    return estimate


def forecast_cycles(
    history: Sequence[CycleRecord],
    count: int = PREDICTION_COUNT,
    period_length: int = DEFAULT_PERIOD_LENGTH,
    window: int = PREDICTION_WINDOW
) -> CycleForecast:
    """
    Forecast upcoming cycles from the most recent recorded cycles.

    Args:
        history: Cycle records ordered newest first
        count: Number of cycles to predict
        period_length: Predicted period length in days
        window: How many of the newest records feed the estimate

    Returns:
        CycleForecast with the average length and `count` predictions

    Raises:
        InsufficientHistoryError: If fewer than three cycles are recorded
    """
    recent = list(history[:window])
    if len(recent) < MIN_CYCLES_FOR_PREDICTION:
        logger.info("Not enough cycles to forecast", extra={
            "cycles_available": len(recent),
            "cycles_required": MIN_CYCLES_FOR_PREDICTION
        })
        raise InsufficientHistoryError(len(recent), MIN_CYCLES_FOR_PREDICTION)

    avg_length = estimate_cycle_length(recent)
    predictions = predict_cycles(recent[0], avg_length, count=count, period_length=period_length)

    logger.info("Cycle forecast calculated", extra={
        "cycles_used": len(recent),
        "average_cycle_length": avg_length,
        "last_cycle_start": str(recent[0].start_date)
    })

    return CycleForecast(
        average_cycle_length=avg_length,
        cycles_used=len(recent),
        predictions=predictions,
    )
