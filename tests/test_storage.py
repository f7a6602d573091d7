"""
Tests for the DynamoDB-backed user data repository.
"""
from datetime import date
from decimal import Decimal

from src.models.cycle import CycleRecord
from src.models.observation import DayObservation, SymptomLog
from src.utils.dynamo import create_cycle_sk, create_day_sk, create_pk, create_symptom_sk
from src.utils.storage import to_item


def test_key_helpers():
    assert create_pk("u1") == "USER#u1"
    assert create_cycle_sk("2024-01-01") == "CYCLE#2024-01-01"
    assert create_day_sk("2024-01-01") == "DAY#2024-01-01"
    assert create_symptom_sk("2024-01-01", "abc") == "SYMPTOM#2024-01-01#abc"


def test_to_item_converts_types(sample_profile):
    item = to_item(sample_profile)
    assert item["weight"] == Decimal("61.5")
    assert item["last_period_date"] == "2024-01-01"
    assert item["flow_amount"] == "moderate"
    assert "period_interval" not in item


def test_profile_upsert(repository, sample_profile):
    assert repository.get_profile("u1") is None
    assert repository.save_profile("u1", sample_profile) is True
    assert repository.save_profile("u1", sample_profile) is False
    assert repository.get_profile("u1") == sample_profile


def test_records_are_scoped_by_kind_and_user(repository, dynamo):
    repository.put_cycle("u1", CycleRecord(start_date=date(2024, 1, 1), end_date=date(2024, 1, 5)))
    repository.put_observation("u1", DayObservation(date=date(2024, 1, 2), is_period_day=True, pads_used=2))
    repository.put_cycle("u2", CycleRecord(start_date=date(2024, 2, 1)))

    assert [c.start_date for c in repository.list_cycles("u1")] == [date(2024, 1, 1)]
    assert [o.date for o in repository.list_observations("u1")] == [date(2024, 1, 2)]
    assert ("USER#u1", "CYCLE#2024-01-01") in dynamo.items


def test_put_symptom_assigns_id(repository):
    stored = repository.put_symptom("u1", SymptomLog(date=date(2024, 1, 3), symptom_type="cramps"))
    assert stored.symptom_id
    assert repository.list_symptoms("u1") == [stored]


def test_delete_observation(repository):
    repository.put_observation("u1", DayObservation(date=date(2024, 1, 2), mood="ok"))
    repository.delete_observation("u1", "2024-01-02")
    assert repository.list_observations("u1") == []


def test_load_history(repository, sample_history):
    for cycle in sample_history.cycles:
        repository.put_cycle("u1", cycle)
    for observation in sample_history.observations:
        repository.put_observation("u1", observation)
    for symptom in sample_history.symptoms:
        repository.put_symptom("u1", symptom)

    history = repository.load_history("u1")
    assert history.cycles == sample_history.cycles
    assert history.observations == sample_history.observations
    assert [s.symptom_id for s in history.symptoms] == ["s1", "s2", "s3"]


def test_put_observations_in_batch(repository):
    observations = [
        DayObservation(date=date(2024, 2, day), is_period_day=True, pads_used=2) for day in (1, 2, 3)
    ]
    repository.put_observations("u1", observations)
    assert repository.list_observations("u1") == observations
