"""
Lambda handlers for cycle records and symptom logs.
"""
from datetime import date
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.cycle import CycleRecord
from src.models.observation import SymptomLog
from src.models.requests import CycleRequest, DateRangeQuery, SymptomRequest
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import error, http_method, parse_body, path_params, query_params, success

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    List, create or amend cycle records.

    GET lists cycles newest first. POST creates a cycle; a second cycle with
    the same start date is rejected. PUT on /cycles/{startDate} changes the
    end date and notes of an existing cycle.
    """
    repository = get_repository()
    method = http_method(event)

    if method == "GET":
        history = repository.load_history(user_id)
        return success(history.most_recent_first())

    if method == "POST":
        request = CycleRequest(**parse_body(event))
        history = repository.load_history(user_id)
        record = history.add_cycle(CycleRecord(**request.model_dump()))
        repository.put_cycle(user_id, record)
        logger.info("Cycle created", extra={"start_date": str(record.start_date)})
        return success(record, message="Cycle created successfully", status_code=201)

    if method == "PUT":
        start_date = date.fromisoformat(path_params(event).get("startDate", ""))
        body = parse_body(event)
        body.pop("startDate", None)
        body.pop("start_date", None)
        request = CycleRequest(start_date=start_date, **body)
        changes = {
            name: value for name, value in request.model_dump(exclude_unset=True).items()
            if name in ("end_date", "notes")
        }
        history = repository.load_history(user_id)
        record = history.amend_cycle(start_date, **changes)
        repository.put_cycle(user_id, record)
        return success(record, message="Cycle updated successfully")

    return error(405, f"Method {method} not allowed")


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def symptoms_handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    List or log symptoms.

    GET accepts optional startDate/endDate/symptomType filters. POST logs a
    symptom; an explicit cycleStartDate must name a recorded cycle.
    """
    repository = get_repository()
    method = http_method(event)

    if method == "GET":
        params = query_params(event)
        bounds = DateRangeQuery(**params)
        symptom_type = params.get("symptomType")
        symptoms = [
            symptom for symptom in repository.list_symptoms(user_id)
            if (bounds.start_date is None or symptom.date >= bounds.start_date)
            and (bounds.end_date is None or symptom.date <= bounds.end_date)
            and (not symptom_type or symptom.symptom_type == symptom_type)
        ]
        symptoms.sort(key=lambda symptom: symptom.date, reverse=True)
        return success(symptoms)

    if method == "POST":
        request = SymptomRequest(**parse_body(event))
        if request.cycle_start_date is not None:
            history = repository.load_history(user_id)
            if history.get_cycle(request.cycle_start_date) is None:
                return error(404, f"No cycle starts on {request.cycle_start_date}")
        symptom = repository.put_symptom(user_id, SymptomLog(**request.model_dump()))
        return success(symptom, message="Symptom logged successfully", status_code=201)

    return error(405, f"Method {method} not allowed")
