"""
DynamoDB access for the tracker table.

All of a user's data lives under one partition key; sort keys separate the
record kinds:

    PK = USER#<user_id>
    SK = PROFILE | CYCLE#<YYYY-MM-DD> | DAY#<YYYY-MM-DD> | SYMPTOM#<YYYY-MM-DD>#<id>
"""
import os
from typing import Any, Dict, Iterable, List, Optional
import boto3
from boto3.dynamodb.conditions import Key

# Singleton instance
_dynamo_instance = None

PROFILE_SK = "PROFILE"
CYCLE_PREFIX = "CYCLE#"
DAY_PREFIX = "DAY#"
SYMPTOM_PREFIX = "SYMPTOM#"


def get_dynamo() -> 'DynamoDBClient':
    """
    Get or create the shared DynamoDBClient for the tracker table.

    Returns:
        DynamoDBClient bound to TRACKER_TABLE_NAME

    Raises:
        EnvironmentError: If TRACKER_TABLE_NAME environment variable is not set
    """
    global _dynamo_instance
    if _dynamo_instance is None:
        table_name = os.environ.get('TRACKER_TABLE_NAME')
        if not table_name:
            raise EnvironmentError(
                "TRACKER_TABLE_NAME environment variable not set. "
                "It must name the DynamoDB table holding tracker data."
            )
        _dynamo_instance = DynamoDBClient(table_name)
    return _dynamo_instance


class DynamoDBClient:
    """Thin wrapper over a boto3 Table resource."""

    def __init__(self, table_name: str):
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return self.table.put_item(Item=item)

    def put_items(self, items: Iterable[Dict[str, Any]]) -> None:
        """Write several items, letting the batch writer chunk and retry them."""
        with self.table.batch_writer() as batch:
            for item in items:
                batch.put_item(Item=item)

    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """Fetch one item by its full key, or None when it does not exist."""
        response = self.table.get_item(Key=key)
        return response.get('Item')

    def query_items(
        self,
        partition_key: str,
        partition_value: str,
        sort_key_condition: Optional[Key] = None
    ) -> List[Dict[str, Any]]:
        """
        Query one partition, optionally narrowed by a sort key condition.

        Pages are followed through LastEvaluatedKey so the full result set
        is returned.

        Args:
            partition_key: Name of the partition key attribute
            partition_value: Partition to read
            sort_key_condition: Optional condition such as Key("SK").begins_with(...)

        Returns:
            Items in sort key order
        """
        key_condition = Key(partition_key).eq(partition_value)
        if sort_key_condition:
            key_condition = key_condition & sort_key_condition

        query_args = {"KeyConditionExpression": key_condition}
        items: List[Dict[str, Any]] = []
        while True:
            response = self.table.query(**query_args)
            items.extend(response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            query_args["ExclusiveStartKey"] = last_key

    def delete_item(self, key: Dict[str, str]) -> Dict[str, Any]:
        return self.table.delete_item(Key=key)


def create_pk(user_id: str) -> str:
    """Create partition key from user ID."""
    return f"USER#{user_id}"


def create_cycle_sk(date_str: str) -> str:
    """Create sort key for a cycle record keyed by its start date."""
    return f"{CYCLE_PREFIX}{date_str}"


def create_day_sk(date_str: str) -> str:
    return f"{DAY_PREFIX}{date_str}"


def create_symptom_sk(date_str: str, symptom_id: str) -> str:
    """
    Create sort key for a symptom log.

    Several symptoms may be logged on the same day, so the key carries a
    per-symptom identifier after the date.

    Returns:
        Sort key in format "SYMPTOM#{date_str}#{symptom_id}"
    """
    return f"{SYMPTOM_PREFIX}{date_str}#{symptom_id}"
