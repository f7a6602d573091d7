"""
Lambda handler for the monthly phase calendar.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.requests import CalendarQuery
from src.services.phase import build_month_calendar
from src.services.utils import month_bounds
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import query_params, success

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Annotate a month with predicted phases plus the observations logged in it.

    The month is chosen with the year and month query parameters. Without a
    profile, a last period date or a cycle length, no days are marked.
    """
    query = CalendarQuery(**query_params(event))
    repository = get_repository()
    profile = repository.get_profile(user_id)

    events = []
    if profile is not None and profile.last_period_date and profile.cycle_length:
        events = build_month_calendar(query.year, query.month, profile.to_parameters())
    else:
        logger.info("Calendar requested without cycle parameters", extra={
            "has_profile": profile is not None
        })

    start, end = month_bounds(query.year, query.month)
    notes = repository.load_history(user_id).observations_between(start, end)

    return success({
        "year": query.year,
        "month": query.month,
        "events": events,
        "notes": notes,
    })
