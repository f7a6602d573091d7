"""
Lambda handler for upcoming-period alerts.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.services.notification import build_period_alert
from src.services.utils import today_in
from src.utils.clients import get_default_timezone, get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import query_params, success

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Return the period alert due for the caller today, if any.

    "Today" is resolved in the timezone query parameter, or the configured
    default timezone.
    """
    profile = get_repository().get_profile(user_id)
    if profile is None or profile.last_period_date is None:
        return success({"alert": None})

    today = today_in(query_params(event).get("timezone") or get_default_timezone())
    alert = build_period_alert(profile.to_parameters(), today)
    return success({"alert": alert})
