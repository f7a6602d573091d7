"""
Lambda handler for reports and period statistics.
"""
from typing import Callable, Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.profile import ProfileParameters
from src.models.requests import CalendarQuery, CustomReportQuery, DateRangeQuery
from src.services.report import (
    build_custom_report,
    build_cycle_report,
    build_monthly_report,
    build_summary_report,
    build_symptom_analysis,
)
from src.services.statistics import (
    calculate_period_statistics,
    calculate_period_summaries,
    current_period_summary,
)
from src.services.utils import today_in
from src.utils.clients import get_default_timezone, get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import error, path_params, query_params, success

tracer = Tracer()


def _summary(user_id: str, params: Dict) -> Dict:
    repository = get_repository()
    return build_summary_report(repository.get_profile(user_id), repository.load_history(user_id))


def _monthly(user_id: str, params: Dict) -> Dict:
    query = CalendarQuery(**params)
    return build_monthly_report(get_repository().load_history(user_id), query.year, query.month)


def _cycles(user_id: str, params: Dict) -> Dict:
    return build_cycle_report(get_repository().load_history(user_id))


def _custom(user_id: str, params: Dict) -> Dict:
    query = CustomReportQuery(**params)
    return build_custom_report(
        get_repository().load_history(user_id),
        query.start_date,
        query.end_date,
        include_notes=query.include_notes,
        include_symptoms=query.include_symptoms,
        include_cycles=query.include_cycles,
        include_periods=query.include_periods
    )


def _periods(user_id: str, params: Dict) -> Dict:
    bounds = DateRangeQuery(**params)
    history = get_repository().load_history(user_id)
    return calculate_period_summaries(
        history.most_recent_first(), history.observations, bounds.start_date, bounds.end_date
    )


def _symptoms_analysis(user_id: str, params: Dict) -> Dict:
    bounds = DateRangeQuery(**params)
    repository = get_repository()
    profile = repository.get_profile(user_id)
    cycle_params = profile.to_parameters() if profile else ProfileParameters()
    return build_symptom_analysis(
        repository.load_history(user_id), cycle_params, bounds.start_date, bounds.end_date
    )


def _current_period(user_id: str, params: Dict) -> Dict:
    today = today_in(params.get("timezone") or get_default_timezone())
    summary = current_period_summary(get_repository().load_history(user_id).observations, today)
    return {"currentPeriod": summary, "date": today}


def _period_stats(user_id: str, params: Dict) -> Dict:
    today = today_in(params.get("timezone") or get_default_timezone())
    return calculate_period_statistics(get_repository().load_history(user_id).observations, today)


REPORTS: Dict[str, Callable[[str, Dict], Dict]] = {
    "summary": _summary,
    "monthly": _monthly,
    "cycles": _cycles,
    "custom": _custom,
    "periods": _periods,
    "symptoms-analysis": _symptoms_analysis,
    "current-period": _current_period,
    "period-stats": _period_stats,
}


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Handle report and statistics requests.

    The report is named by the {report} path parameter; report options come
    from the query string. Rolling-window statistics resolve "today" in the
    timezone query parameter, falling back to the configured default.

    Args:
        event: API Gateway event
        context: Lambda context
        user_id: Authenticated user

    Returns:
        API Gateway response
    """
    report_name = path_params(event).get("report", "summary")
    build = REPORTS.get(report_name)
    if build is None:
        return error(404, f"Unknown report: {report_name}")

    logger.info("Building report", extra={"report": report_name})
    return success(build(user_id, query_params(event)))
