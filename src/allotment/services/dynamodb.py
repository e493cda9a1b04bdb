"""DynamoDB access for allotment tables.

Table names are ``{prefix}-{table}`` where the prefix comes from
DYNAMODB_TABLE_PREFIX, falling back to ``allotment-{ENVIRONMENT}``.
"""

import os
from collections.abc import Iterable
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

# Module-level singleton so every repository shares one boto3 resource
_dynamodb_service_instance: "DynamoDBService | None" = None


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Get or create the shared DynamoDB service.

    Args:
        environment: Environment name. Only used on first call.

    Returns:
        Shared DynamoDBService instance
    """
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Drop the shared instance (for testing only).

    The next get_dynamodb_service() call then builds its boto3 resource
    inside whatever mock_aws context is active.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


class DynamoDBService:
    """Tenant-agnostic table operations used by the repositories."""

    def __init__(self, environment: str | None = None) -> None:
        """Initialize DynamoDB service.

        Args:
            environment: Environment name (dev/prod). Defaults to ENVIRONMENT env var.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.name_prefix = os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"allotment-{self.environment}"
        )
        self._dynamodb = boto3.resource("dynamodb")

    def table_name(self, table: str) -> str:
        return f"{self.name_prefix}-{table}"

    def _table(self, table: str) -> Any:
        return self._dynamodb.Table(self.table_name(table))

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> bool:
        """Write an item, optionally guarded by a condition.

        Args:
            table: Table name without prefix
            item: Item to store
            condition_expression: Optional condition for the write

        Returns:
            True if written, False if the condition failed
        """
        kwargs: dict[str, Any] = {"Item": item}
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        try:
            self._table(table).put_item(**kwargs)
        except ClientError as e:
            if e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED:
                return False
            raise
        return True

    def insert_missing(
        self,
        table: str,
        items: Iterable[dict[str, Any]],
        partition_key: str,
    ) -> tuple[int, int]:
        """Insert each item whose primary key is not taken yet.

        Existing items are left untouched. Conditional writes cannot go
        through batch_write_item, so items are put one at a time.

        Args:
            table: Table name without prefix
            items: Items to insert
            partition_key: Partition key attribute, used in the existence check

        Returns:
            (inserted, skipped) counts
        """
        condition = f"attribute_not_exists({partition_key})"
        inserted = skipped = 0
        for item in items:
            if self.put_item(table, item, condition_expression=condition):
                inserted += 1
            else:
                skipped += 1
        return inserted, skipped

    def query_partition(
        self,
        table: str,
        partition_key: str,
        value: str,
        sort_key_condition: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Read a whole partition, ascending by sort key.

        Follows LastEvaluatedKey so callers always get every matching item.

        Args:
            table: Table name without prefix
            partition_key: Partition key attribute name
            value: Partition key value
            sort_key_condition: Optional boto3 Key condition on the sort key

        Returns:
            List of items
        """
        key_condition = Key(partition_key).eq(value)
        if sort_key_condition is not None:
            key_condition = key_condition & sort_key_condition

        kwargs: dict[str, Any] = {"KeyConditionExpression": key_condition}
        table_resource = self._table(table)
        items: list[dict[str, Any]] = []
        while True:
            response = table_resource.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key
