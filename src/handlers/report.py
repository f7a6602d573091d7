"""
Lambda handler for the downloadable CSV health report.
"""
from datetime import datetime, timezone
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.services.report import health_report_filename, render_health_report_csv
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import csv_response

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """Export the caller's profile, cycles, symptoms, notes and periods as CSV."""
    repository = get_repository()
    csv_text = render_health_report_csv(
        repository.get_profile(user_id),
        repository.load_history(user_id)
    )
    filename = health_report_filename(user_id, datetime.now(timezone.utc))
    logger.info("Health report exported", extra={"report_filename": filename})
    return csv_response(filename, csv_text)
