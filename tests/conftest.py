"""
Pytest configuration and shared fixtures.
"""
import json
import pytest
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from src.models.cycle import CycleRecord
from src.models.observation import DayObservation, SymptomLog
from src.models.phase import Intensity
from src.models.profile import ProfileParameters, UserProfile
from src.services.history import CycleHistory
from src.utils.storage import UserDataRepository


class InMemoryDynamo:
    """Stands in for DynamoDBClient, keyed by (PK, SK)."""

    def __init__(self):
        self.items: Dict[tuple, Dict[str, Any]] = {}

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        self.items[(item["PK"], item["SK"])] = dict(item)
        return {}

    def put_items(self, items) -> None:
        for item in items:
            self.put_item(item)

    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        item = self.items.get((key["PK"], key["SK"]))
        return dict(item) if item else None

    def query_items(self, partition_key, partition_value, sort_key_condition=None) -> List[Dict[str, Any]]:
        prefix = ""
        if sort_key_condition is not None:
            prefix = sort_key_condition.get_expression()["values"][1]
        return [
            dict(item) for (pk, sk), item in sorted(self.items.items())
            if pk == partition_value and sk.startswith(prefix)
        ]

    def delete_item(self, key: Dict[str, str]) -> Dict[str, Any]:
        self.items.pop((key["PK"], key["SK"]), None)
        return {}


@dataclass
class FakeLambdaContext:
    function_name: str = "luna-tracker-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:luna-tracker-test"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """Minimal Lambda context accepted by inject_lambda_context."""
    return FakeLambdaContext()


@pytest.fixture
def dynamo() -> InMemoryDynamo:
    return InMemoryDynamo()


@pytest.fixture
def repository(dynamo) -> UserDataRepository:
    """Repository backed by the in-memory table."""
    return UserDataRepository(dynamo)


@pytest.fixture
def api_event():
    """Build an API Gateway proxy event for an authenticated user."""
    def build(
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, str]] = None,
        path: Optional[Dict[str, str]] = None,
        user_id: Optional[str] = "user-1"
    ) -> Dict[str, Any]:
        authorizer = {"user_id": user_id} if user_id else {}
        return {
            "httpMethod": method,
            "body": json.dumps(body) if body is not None else None,
            "queryStringParameters": query,
            "pathParameters": path,
            "requestContext": {"authorizer": authorizer},
        }
    return build


@pytest.fixture
def regular_cycles() -> List[CycleRecord]:
    """Four cycles 28 days apart, newest first."""
    return [
        CycleRecord(start_date=date(2024, 1, 1) + timedelta(days=i * 28))
        for i in reversed(range(4))
    ]


@pytest.fixture
def irregular_cycles() -> List[CycleRecord]:
    """Cycles with 24, 31 and 26 day gaps, newest first."""
    return [
        CycleRecord(start_date=date(2024, 3, 22)),
        CycleRecord(start_date=date(2024, 2, 25)),
        CycleRecord(start_date=date(2024, 1, 25)),
        CycleRecord(start_date=date(2024, 1, 1)),
    ]


@pytest.fixture
def period_observations() -> List[DayObservation]:
    """One January period of three days plus an ordinary day."""
    return [
        DayObservation(date=date(2024, 1, 1), is_period_day=True, pads_used=4, intensity=Intensity.HEAVY),
        DayObservation(date=date(2024, 1, 2), is_period_day=True, pads_used=3, intensity=Intensity.MEDIUM),
        DayObservation(date=date(2024, 1, 3), is_period_day=True, pads_used=2, intensity=Intensity.MEDIUM,
                       notes="Lighter today"),
        DayObservation(date=date(2024, 1, 10), mood="happy", content="Went running"),
    ]


@pytest.fixture
def sample_profile() -> UserProfile:
    return UserProfile(
        age=29,
        weight=61.5,
        height=168,
        cycle_length=28,
        bleeding_duration=5,
        last_period_date=date(2024, 1, 1),
        flow_regularity="regular",
        flow_amount="moderate",
    )


@pytest.fixture
def cycle_params() -> ProfileParameters:
    return ProfileParameters(cycle_length=28, bleeding_duration=5, last_period_date=date(2024, 1, 1))


@pytest.fixture
def sample_history(period_observations) -> CycleHistory:
    """Two ended cycles with period days, symptoms and notes."""
    cycles = [
        CycleRecord(start_date=date(2024, 1, 1), end_date=date(2024, 1, 5), notes="January"),
        CycleRecord(start_date=date(2024, 1, 29), end_date=date(2024, 2, 2)),
    ]
    observations = period_observations + [
        DayObservation(date=date(2024, 1, 29), is_period_day=True, pads_used=5, intensity=Intensity.HEAVY),
        DayObservation(date=date(2024, 1, 30), is_period_day=True, pads_used=3),
    ]
    symptoms = [
        SymptomLog(symptom_id="s1", date=date(2024, 1, 2), symptom_type="cramps", severity="moderate"),
        SymptomLog(symptom_id="s2", date=date(2024, 1, 20), symptom_type="headache", severity="mild",
                   notes="Afternoon"),
        SymptomLog(symptom_id="s3", date=date(2024, 1, 30), symptom_type="cramps", severity="moderate",
                   cycle_start_date=date(2024, 1, 29)),
    ]
    return CycleHistory(cycles=cycles, observations=observations, symptoms=symptoms)
