"""
Lambda handler for cycle predictions.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.requests import ForecastRequest
from src.services.cycle import forecast_cycles
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import http_method, parse_body, query_params, success

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Forecast upcoming cycles from the caller's recorded history.

    Options (count, periodLength) come from the query string on GET and from
    the body otherwise. Fewer than three recorded cycles answer 400.
    """
    options = query_params(event) if http_method(event) == "GET" else parse_body(event)
    request = ForecastRequest(**options)

    history = get_repository().load_history(user_id)
    forecast = forecast_cycles(
        history.most_recent_first(),
        count=request.count,
        period_length=request.period_length
    )

    return success({
        "averageCycleLength": forecast.average_cycle_length,
        "cyclesUsed": forecast.cycles_used,
        "predictions": forecast.predictions,
    })
