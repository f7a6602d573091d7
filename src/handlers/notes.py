"""
Lambda handlers for daily observations and period tracking.
"""
from datetime import date
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.observation import DayObservationUpdate
from src.models.requests import DateRangeQuery, ObservationRequest, TrackPeriodRequest
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import error, http_method, parse_body, path_params, query_params, success

tracer = Tracer()

# Request keys accepted by a partial update, mapped to observation fields
UPDATE_FIELDS = {
    "content": "content",
    "mood": "mood",
    "isPeriodDay": "is_period_day",
    "is_period_day": "is_period_day",
    "padsUsed": "pads_used",
    "pads_used": "pads_used",
    "periodIntensity": "intensity",
    "period_intensity": "intensity",
    "periodNotes": "notes",
    "period_notes": "notes",
}


def _path_date(event: Dict) -> date:
    return date.fromisoformat(path_params(event).get("date", ""))


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Read, upsert, partially update or delete the observation for a day.

    POST replaces the whole observation for its date. A period day not
    covered by a recorded cycle starts a new cycle, which is persisted too.
    PUT on /notes/{date} applies only the supplied fields; turning an
    uncovered day into a period day starts a cycle the same way.
    """
    repository = get_repository()
    method = http_method(event)

    if method == "GET":
        day = _path_date(event) if path_params(event).get("date") else None
        if day is None:
            day = date.fromisoformat(query_params(event).get("date", ""))
        observation = repository.load_history(user_id).get_observation(day)
        if observation is None:
            return error(404, f"No note found for {day}")
        return success(observation)

    if method == "POST":
        request = ObservationRequest(**parse_body(event))
        history = repository.load_history(user_id)
        observation, new_cycle = history.record_observation(request.to_observation())

        repository.put_observation(user_id, observation)
        if new_cycle is not None:
            repository.put_cycle(user_id, new_cycle)

        return success({
            "note": observation,
            "cycleCreated": new_cycle is not None,
        }, message="Note saved successfully")

    if method == "PUT":
        day = _path_date(event)
        body = parse_body(event)
        update = DayObservationUpdate(**{
            UPDATE_FIELDS[key]: value for key, value in body.items() if key in UPDATE_FIELDS
        })

        history = repository.load_history(user_id)
        observation, changed, new_cycle = history.update_observation(day, update)
        if not changed:
            return error(400, "No fields to update")

        repository.put_observation(user_id, observation)
        if new_cycle is not None:
            repository.put_cycle(user_id, new_cycle)

        return success({
            "note": observation,
            "cycleCreated": new_cycle is not None,
        }, message="Note updated successfully")

    if method == "DELETE":
        day = _path_date(event)
        if repository.load_history(user_id).get_observation(day) is None:
            return error(404, f"No note found for {day}")
        repository.delete_observation(user_id, day.isoformat())
        return success(message="Note deleted successfully")

    return error(405, f"Method {method} not allowed")


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def history_handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Observation history, newest first.

    Query parameters: startDate, endDate, limit and periodOnly.
    """
    params = query_params(event)
    bounds = DateRangeQuery(**params)
    period_only = str(params.get("periodOnly", "")).lower() == "true"
    limit = int(params["limit"]) if params.get("limit") else None

    notes = [
        obs for obs in reversed(get_repository().load_history(user_id).observations)
        if (bounds.start_date is None or obs.date >= bounds.start_date)
        and (bounds.end_date is None or obs.date <= bounds.end_date)
        and (not period_only or obs.is_period_day)
    ]
    if limit is not None:
        notes = notes[:max(limit, 0)]

    return success(notes)


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def track_period_handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Mark a run of days as period days in one request.

    Every day in the range gets the same pads and intensity; a cycle starting
    on the first day is created when none exists.
    """
    request = TrackPeriodRequest(**parse_body(event))
    repository = get_repository()
    history = repository.load_history(user_id)

    tracked = history.track_period(
        request.start_date,
        request.end_date,
        pads_used=request.pads_used,
        intensity=request.intensity,
        notes=request.notes
    )

    repository.put_observations(user_id, tracked.observations)
    if tracked.created_cycle is not None:
        repository.put_cycle(user_id, tracked.created_cycle)

    return success({
        "startDate": tracked.start_date,
        "endDate": tracked.end_date,
        "daysCount": tracked.days_count,
        "totalPads": tracked.total_pads,
        "periodDays": tracked.days,
        "cycleCreated": tracked.created_cycle is not None,
    }, message="Period tracked successfully", status_code=201)
