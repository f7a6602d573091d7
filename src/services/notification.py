"""
Period alert service.

Decides whether a user should be reminded about an upcoming period. The
caller supplies "today" already resolved in the user's timezone.
"""
from datetime import date, timedelta
from typing import Optional

from aws_lambda_powertools import Logger
from pydantic import BaseModel

from src.models.profile import ProfileParameters
from src.services.constants import PERIOD_ALERT_HORIZON_DAYS

logger = Logger()

PERIOD_ALERT_TITLE = "Period Alert"


class PeriodAlert(BaseModel):
    title: str = PERIOD_ALERT_TITLE
    message: str
    expected_date: date
    days_until: int


def next_expected_period(params: ProfileParameters) -> Optional[date]:
    """Last period date plus one cycle length, or None without a last period date."""
    if params.last_period_date is None:
        return None
    return params.last_period_date + timedelta(days=params.cycle_length)


def build_period_alert(
    params: ProfileParameters,
    today: date,
    horizon_days: int = PERIOD_ALERT_HORIZON_DAYS
) -> Optional[PeriodAlert]:
    """
    Build a reminder when the next period is due within `horizon_days`.

    Args:
        params: User cycle parameters
        today: Current date in the user's timezone
        horizon_days: How far ahead to warn

    Returns:
        PeriodAlert, or None when no alert is due
    """
    expected = next_expected_period(params)
    if expected is None:
        return None

    days_until = (expected - today).days
    if not 0 <= days_until <= horizon_days:
        return None

    if days_until == 0:
        message = "Your period is expected today! Make sure you're prepared."
    else:
        message = f"Your period is coming in {days_until} day(s). Consider preparing necessary items."

    logger.info("Period alert due", extra={
        "expected_date": str(expected),
        "days_until": days_until
    })
    return PeriodAlert(message=message, expected_date=expected, days_until=days_until)
