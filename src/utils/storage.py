"""
Repository that maps a user's DynamoDB items to domain models.
"""
import json
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from pydantic import BaseModel

from src.models.cycle import CycleRecord
from src.models.observation import DayObservation, SymptomLog
from src.models.profile import UserProfile
from src.services.history import CycleHistory
from src.utils.dynamo import (
    CYCLE_PREFIX,
    DAY_PREFIX,
    PROFILE_SK,
    SYMPTOM_PREFIX,
    DynamoDBClient,
    create_cycle_sk,
    create_day_sk,
    create_pk,
    create_symptom_sk,
)

logger = Logger()

KEY_ATTRIBUTES = ("PK", "SK")


def to_item(model: BaseModel) -> Dict[str, Any]:
    """
    Serialize a model into DynamoDB-compatible attributes.

    Dates become ISO strings and floats become Decimal; None values are
    dropped.
    """
    data = model.model_dump(mode="json", exclude_none=True)
    return json.loads(json.dumps(data), parse_float=Decimal)


def from_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Strip key attributes from a stored item."""
    return {name: value for name, value in item.items() if name not in KEY_ATTRIBUTES}


class UserDataRepository:
    """Loads and stores one user's profile, cycles, observations and symptoms."""

    def __init__(self, dynamo: DynamoDBClient):
        self.dynamo = dynamo

    def _query_prefix(self, user_id: str, prefix: str) -> List[Dict[str, Any]]:
        return self.dynamo.query_items(
            partition_key="PK",
            partition_value=create_pk(user_id),
            sort_key_condition=Key("SK").begins_with(prefix)
        )

    def _put(self, user_id: str, sort_key: str, model: BaseModel) -> None:
        self.dynamo.put_item({
            "PK": create_pk(user_id),
            "SK": sort_key,
            **to_item(model)
        })

    # Profile

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        item = self.dynamo.get_item({"PK": create_pk(user_id), "SK": PROFILE_SK})
        if not item:
            return None
        return UserProfile(**from_item(item))

    def save_profile(self, user_id: str, profile: UserProfile) -> bool:
        """
        Store the profile.

        Returns:
            True when the profile was created, False when it replaced one
        """
        created = self.get_profile(user_id) is None
        self._put(user_id, PROFILE_SK, profile)
        logger.info("Profile saved", extra={"user_id": user_id, "profile_created": created})
        return created

    # Cycles

    def list_cycles(self, user_id: str) -> List[CycleRecord]:
        return [CycleRecord(**from_item(item)) for item in self._query_prefix(user_id, CYCLE_PREFIX)]

    def put_cycle(self, user_id: str, record: CycleRecord) -> None:
        self._put(user_id, create_cycle_sk(record.start_date.isoformat()), record)

    # Observations

    def list_observations(self, user_id: str) -> List[DayObservation]:
        return [DayObservation(**from_item(item)) for item in self._query_prefix(user_id, DAY_PREFIX)]

    def put_observation(self, user_id: str, observation: DayObservation) -> None:
        self._put(user_id, create_day_sk(observation.date.isoformat()), observation)

    def put_observations(self, user_id: str, observations: List[DayObservation]) -> None:
        """Store a run of observations in one batch."""
        self.dynamo.put_items(
            {
                "PK": create_pk(user_id),
                "SK": create_day_sk(observation.date.isoformat()),
                **to_item(observation)
            }
            for observation in observations
        )

    def delete_observation(self, user_id: str, date_str: str) -> None:
        self.dynamo.delete_item({"PK": create_pk(user_id), "SK": create_day_sk(date_str)})

    # Symptoms

    def list_symptoms(self, user_id: str) -> List[SymptomLog]:
        return [SymptomLog(**from_item(item)) for item in self._query_prefix(user_id, SYMPTOM_PREFIX)]

    def put_symptom(self, user_id: str, symptom: SymptomLog) -> SymptomLog:
        if symptom.symptom_id is None:
            symptom = symptom.model_copy(update={"symptom_id": uuid.uuid4().hex})
        self._put(user_id, create_symptom_sk(symptom.date.isoformat(), symptom.symptom_id), symptom)
        return symptom

    # Snapshot

    def load_history(self, user_id: str) -> CycleHistory:
        """Read a consistent in-memory snapshot of the user's history."""
        history = CycleHistory(
            cycles=self.list_cycles(user_id),
            observations=self.list_observations(user_id),
            symptoms=self.list_symptoms(user_id),
        )
        logger.debug("History loaded", extra={
            "user_id": user_id,
            "cycles": len(history.cycles),
            "observations": len(history.observations)
        })
        return history
