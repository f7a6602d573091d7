"""
Tests for the Lambda handlers.
"""
import json
import pytest
from datetime import date
from unittest.mock import patch

from src.handlers import calendar, cycles, notes, notifications, prediction, profile, report, statistics
from src.models.cycle import CycleRecord


@pytest.fixture(autouse=True)
def patched_repository(repository):
    """Route every handler to the in-memory repository."""
    modules = [calendar, cycles, notes, notifications, prediction, profile, report, statistics]
    patches = [patch.object(module, "get_repository", return_value=repository) for module in modules]
    for p in patches:
        p.start()
    yield repository
    for p in patches:
        p.stop()


def body_of(response):
    return json.loads(response["body"])


def test_missing_user_is_unauthorized(api_event, lambda_context):
    response = profile.handler(api_event(user_id=None), lambda_context)
    assert response["statusCode"] == 401
    assert body_of(response)["status"] == "error"


def test_profile_upsert_and_read(api_event, lambda_context):
    payload = {"age": 30, "cycleLength": 28, "lastPeriodDate": "2024-01-01", "flowAmount": "Heavy"}

    created = profile.handler(api_event("POST", body=payload), lambda_context)
    assert created["statusCode"] == 201
    assert body_of(created)["data"]["flow_amount"] == "heavy"

    replaced = profile.handler(api_event("POST", body=payload), lambda_context)
    assert replaced["statusCode"] == 200

    read = body_of(profile.handler(api_event("GET"), lambda_context))
    assert read["data"]["hasProfile"] is True
    assert read["data"]["profile"]["cycle_length"] == 28


def test_profile_validation_error(api_event, lambda_context):
    response = profile.handler(api_event("POST", body={"age": 200}), lambda_context)
    assert response["statusCode"] == 400


def test_profile_malformed_body(api_event, lambda_context):
    event = api_event("POST")
    event["body"] = "{not json"
    assert profile.handler(event, lambda_context)["statusCode"] == 400


def test_last_period_not_found(api_event, lambda_context):
    assert profile.last_period_handler(api_event("GET"), lambda_context)["statusCode"] == 404


def test_cycle_create_and_duplicate(api_event, lambda_context, repository):
    event = api_event("POST", body={"startDate": "2024-01-01", "endDate": "2024-01-05"})
    assert cycles.handler(event, lambda_context)["statusCode"] == 201
    assert cycles.handler(event, lambda_context)["statusCode"] == 409
    assert len(repository.list_cycles("user-1")) == 1


def test_cycle_inverted_dates(api_event, lambda_context):
    event = api_event("POST", body={"startDate": "2024-01-05", "endDate": "2024-01-01"})
    assert cycles.handler(event, lambda_context)["statusCode"] == 400


def test_cycle_amend(api_event, lambda_context, repository):
    repository.put_cycle("user-1", CycleRecord(start_date=date(2024, 1, 1)))
    event = api_event("PUT", body={"endDate": "2024-01-04"}, path={"startDate": "2024-01-01"})

    response = cycles.handler(event, lambda_context)
    assert response["statusCode"] == 200
    assert repository.list_cycles("user-1")[0].end_date == date(2024, 1, 4)

    missing = api_event("PUT", body={"notes": "x"}, path={"startDate": "2024-02-01"})
    assert cycles.handler(missing, lambda_context)["statusCode"] == 404


def test_symptom_logging(api_event, lambda_context):
    event = api_event("POST", body={"date": "2024-01-02", "symptomType": "cramps", "severity": "mild"})
    assert cycles.symptoms_handler(event, lambda_context)["statusCode"] == 201

    unknown_cycle = api_event("POST", body={
        "date": "2024-01-02", "symptomType": "cramps", "cycleStartDate": "2024-01-01"
    })
    assert cycles.symptoms_handler(unknown_cycle, lambda_context)["statusCode"] == 404

    listed = body_of(cycles.symptoms_handler(api_event("GET", query={"symptomType": "cramps"}), lambda_context))
    assert [s["symptom_type"] for s in listed["data"]] == ["cramps"]


def test_period_note_starts_cycle(api_event, lambda_context, repository):
    event = api_event("POST", body={"date": "2024-01-01", "isPeriodDay": True, "padsUsed": 3})
    response = body_of(notes.handler(event, lambda_context))

    assert response["data"]["cycleCreated"] is True
    assert response["data"]["note"]["intensity"] == "medium"
    assert [c.start_date for c in repository.list_cycles("user-1")] == [date(2024, 1, 1)]


def test_note_partial_update(api_event, lambda_context, repository):
    notes.handler(api_event("POST", body={
        "date": "2024-01-01", "isPeriodDay": True, "padsUsed": 3, "mood": "tired"
    }), lambda_context)

    event = api_event("PUT", body={"isPeriodDay": False, "padsUsed": 5}, path={"date": "2024-01-01"})
    data = body_of(notes.handler(event, lambda_context))["data"]
    assert data["cycleCreated"] is False
    updated = data["note"]
    assert updated["is_period_day"] is False
    assert updated["pads_used"] == 0
    assert updated["mood"] == "tired"

    empty = api_event("PUT", body={}, path={"date": "2024-01-01"})
    assert notes.handler(empty, lambda_context)["statusCode"] == 400

    missing = api_event("PUT", body={"mood": "ok"}, path={"date": "2024-03-01"})
    assert notes.handler(missing, lambda_context)["statusCode"] == 404


def test_note_update_to_period_day_creates_cycle(api_event, lambda_context, repository):
    notes.handler(api_event("POST", body={"date": "2024-03-10", "mood": "ok"}), lambda_context)
    assert repository.list_cycles("user-1") == []

    event = api_event("PUT", body={"isPeriodDay": True, "padsUsed": 3}, path={"date": "2024-03-10"})
    response = notes.handler(event, lambda_context)

    assert response["statusCode"] == 200
    data = body_of(response)["data"]
    assert data["cycleCreated"] is True
    assert data["note"]["pads_used"] == 3
    assert repository.list_cycles("user-1") == [CycleRecord(start_date=date(2024, 3, 10))]


def test_note_read_and_delete(api_event, lambda_context, repository):
    notes.handler(api_event("POST", body={"date": "2024-01-10", "content": "Hello"}), lambda_context)

    read = notes.handler(api_event("GET", path={"date": "2024-01-10"}), lambda_context)
    assert body_of(read)["data"]["content"] == "Hello"

    deleted = notes.handler(api_event("DELETE", path={"date": "2024-01-10"}), lambda_context)
    assert deleted["statusCode"] == 200
    assert repository.list_observations("user-1") == []


def test_note_history_filters(api_event, lambda_context):
    for day, period in (("2024-01-01", True), ("2024-01-02", False), ("2024-01-03", True)):
        notes.handler(api_event("POST", body={"date": day, "isPeriodDay": period}), lambda_context)

    response = notes.history_handler(api_event("GET", query={"periodOnly": "true", "limit": "1"}), lambda_context)
    assert [n["date"] for n in body_of(response)["data"]] == ["2024-01-03"]


def test_track_period(api_event, lambda_context, repository):
    event = api_event("POST", body={
        "startDate": "2024-02-01", "endDate": "2024-02-03", "padsUsed": 2, "intensity": "Heavy"
    })
    response = notes.track_period_handler(event, lambda_context)
    data = body_of(response)["data"]

    assert response["statusCode"] == 201
    assert data["daysCount"] == 3
    assert data["totalPads"] == 6
    assert data["cycleCreated"] is True
    assert len(repository.list_observations("user-1")) == 3


def test_track_period_inverted(api_event, lambda_context):
    event = api_event("POST", body={"startDate": "2024-02-03", "endDate": "2024-02-01"})
    assert notes.track_period_handler(event, lambda_context)["statusCode"] == 400


def test_prediction_needs_three_cycles(api_event, lambda_context):
    response = prediction.handler(api_event("GET"), lambda_context)
    assert response["statusCode"] == 400
    assert body_of(response)["message"] == "Not enough cycle data for prediction"


def test_prediction(api_event, lambda_context, repository, regular_cycles):
    for cycle in regular_cycles:
        repository.put_cycle("user-1", cycle)

    response = prediction.handler(api_event("GET", query={"count": "2"}), lambda_context)
    data = body_of(response)["data"]
    assert data["averageCycleLength"] == 28
    assert [p["predicted_start"] for p in data["predictions"]] == ["2024-04-22", "2024-05-20"]


def test_calendar(api_event, lambda_context, repository, sample_profile):
    query = {"year": "2024", "month": "1"}
    empty = body_of(calendar.handler(api_event("GET", query=query), lambda_context))
    assert empty["data"]["events"] == []

    repository.save_profile("user-1", sample_profile)
    data = body_of(calendar.handler(api_event("GET", query=query), lambda_context))["data"]
    assert len(data["events"]) == 15
    assert data["events"][0] == {
        "date": "2024-01-01", "day_of_cycle": 1, "phase": "Period", "is_fertile": False, "is_ovulation": False
    }


def test_calendar_rejects_bad_month(api_event, lambda_context):
    response = calendar.handler(api_event("GET", query={"year": "2024", "month": "13"}), lambda_context)
    assert response["statusCode"] == 400


@pytest.mark.parametrize("report_name", [
    "summary", "cycles", "periods", "symptoms-analysis", "current-period", "period-stats"
])
def test_statistics_reports(api_event, lambda_context, report_name):
    response = statistics.handler(api_event("GET", path={"report": report_name}), lambda_context)
    assert response["statusCode"] == 200


def test_statistics_monthly_and_custom(api_event, lambda_context):
    monthly = statistics.handler(
        api_event("GET", path={"report": "monthly"}, query={"year": "2024", "month": "3"}), lambda_context
    )
    assert body_of(monthly)["data"]["month"] == "2024-03"

    custom = statistics.handler(
        api_event("GET", path={"report": "custom"}, query={"startDate": "2024-01-01"}), lambda_context
    )
    assert custom["statusCode"] == 400


def test_statistics_unknown_report(api_event, lambda_context):
    response = statistics.handler(api_event("GET", path={"report": "nope"}), lambda_context)
    assert response["statusCode"] == 404


def test_statistics_bad_timezone(api_event, lambda_context):
    event = api_event("GET", path={"report": "current-period"}, query={"timezone": "Mars/Base"})
    assert statistics.handler(event, lambda_context)["statusCode"] == 400


def test_health_report_csv(api_event, lambda_context, repository, sample_profile):
    repository.save_profile("user-1", sample_profile)
    response = report.handler(api_event("GET"), lambda_context)

    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "text/csv"
    assert 'filename="health_report_user-1_' in response["headers"]["Content-Disposition"]
    assert response["body"].startswith("Record Type,Date,End Date")


def test_period_alert(api_event, lambda_context, repository, sample_profile):
    assert body_of(notifications.handler(api_event("GET"), lambda_context))["data"]["alert"] is None

    repository.save_profile("user-1", sample_profile)
    with patch.object(notifications, "today_in", return_value=date(2024, 1, 28)):
        alert = body_of(notifications.handler(api_event("GET"), lambda_context))["data"]["alert"]
    assert alert["days_until"] == 1
    assert alert["expected_date"] == "2024-01-29"
