"""DynamoDB-backed retry record and policy stores for multi-instance deployments.

Table layout:

    retry records (PK: record_id)
        entity_key, task_type, request_payload (JSON), response_payload (JSON),
        state, attempt_count, created_at, last_attempt_at, next_eligible_at (ISO),
        next_eligible_at_ms (epoch milliseconds)
        GSI state-next_eligible_at-index: state + next_eligible_at_ms

    retry record keys (PK: record_key = "<task_type>#<entity_key>")
        record_id
        One item per (entity_key, task_type); written in the same transaction
        as the record so concurrent intake cannot create two records.

    retry policies (PK: task_type)
        max_attempts, retry_interval_minutes
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from infrastructure.operations import OperationResult
from infrastructure.resilience.retry.errors import (
    DuplicateRetryRecordError,
    RetryStoreError,
)
from infrastructure.resilience.retry.models import RetryPolicy, RetryRecord, RetryState
from integrations.aws import dynamodb_next

logger = structlog.get_logger()

DUE_INDEX_NAME = "state-next_eligible_at-index"


def _record_key(entity_key: str, task_type: str) -> str:
    return f"{task_type}#{entity_key}"


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def _get_value(attr: Any, default: Any = None) -> Any:
    """Extract a scalar from a DynamoDB attribute value."""
    if isinstance(attr, dict):
        if "S" in attr:
            return attr["S"]
        if "N" in attr:
            return attr["N"]
    return default


def _raise_for_result(result: OperationResult, operation: str, **context) -> None:
    if result.is_success:
        return
    logger.error(
        "dynamodb_retry_store_operation_failed",
        operation=operation,
        error=result.message,
        error_code=result.error_code,
        **context,
    )
    raise RetryStoreError(
        f"DynamoDB {operation} failed: {result.message}", error_code=result.error_code
    )


class DynamoDBRetryRecordStore:
    """RetryRecordStore backed by DynamoDB.

    Args:
        table_name: Retry records table
        keys_table_name: Table holding one item per (entity_key, task_type)
    """

    def __init__(self, table_name: str, keys_table_name: str):
        self.table_name = table_name
        self.keys_table_name = keys_table_name
        logger.info(
            "dynamodb_retry_record_store_initialized",
            table_name=table_name,
            keys_table_name=keys_table_name,
        )

    def get(self, record_id: str) -> Optional[RetryRecord]:
        result = dynamodb_next.get_item(
            table_name=self.table_name,
            Key={"record_id": {"S": record_id}},
            ConsistentRead=True,
        )
        _raise_for_result(result, "get_item", record_id=record_id)

        item = (result.data or {}).get("Item")
        if not item:
            return None
        return self._item_to_record(item)

    def find_by_entity(self, entity_key: str, task_type: str) -> Optional[RetryRecord]:
        record_id = self._find_record_id(entity_key, task_type)
        if record_id is None:
            return None
        return self.get(record_id)

    def _find_record_id(self, entity_key: str, task_type: str) -> Optional[str]:
        result = dynamodb_next.get_item(
            table_name=self.keys_table_name,
            Key={"record_key": {"S": _record_key(entity_key, task_type)}},
            ConsistentRead=True,
        )
        _raise_for_result(
            result, "get_item", entity_key=entity_key, task_type=task_type
        )

        key_item = (result.data or {}).get("Item")
        if not key_item:
            return None
        return _get_value(key_item.get("record_id"))

    def create(self, record: RetryRecord) -> RetryRecord:
        """Insert the record and its key item atomically.

        Raises:
            DuplicateRetryRecordError: If the key item already exists
            RetryStoreError: On any other failure
        """
        result = dynamodb_next.transact_write_items(
            TransactItems=[
                {
                    "Put": {
                        "TableName": self.keys_table_name,
                        "Item": self._key_item(record),
                        "ConditionExpression": "attribute_not_exists(record_key)",
                    }
                },
                {
                    "Put": {
                        "TableName": self.table_name,
                        "Item": self._record_to_item(record),
                    }
                },
            ]
        )

        if result.is_conflict:
            logger.info(
                "retry_record_create_conflict",
                entity_key=record.entity_key,
                task_type=record.task_type,
            )
            raise DuplicateRetryRecordError(record.entity_key, record.task_type)
        _raise_for_result(result, "transact_write_items", record_id=record.id)

        logger.info(
            "retry_record_created",
            record_id=record.id,
            entity_key=record.entity_key,
            task_type=record.task_type,
            state=record.state.value,
        )
        return record

    def upsert(self, record: RetryRecord) -> RetryRecord:
        """Write the record and point its key item at it.

        Within the same transaction, a different record already holding the
        pair is deleted, and so is the key item of the pair this record held
        before.
        """
        transact_items = [
            {
                "Put": {
                    "TableName": self.keys_table_name,
                    "Item": self._key_item(record),
                }
            },
            {
                "Put": {
                    "TableName": self.table_name,
                    "Item": self._record_to_item(record),
                }
            },
        ]

        displaced_id = self._find_record_id(record.entity_key, record.task_type)
        if displaced_id is not None and displaced_id != record.id:
            transact_items.append(
                {
                    "Delete": {
                        "TableName": self.table_name,
                        "Key": {"record_id": {"S": displaced_id}},
                    }
                }
            )
            logger.info(
                "retry_record_replaced",
                record_id=record.id,
                replaced_record_id=displaced_id,
            )

        previous = self.get(record.id)
        if previous is not None and (previous.entity_key, previous.task_type) != (
            record.entity_key,
            record.task_type,
        ):
            transact_items.append(
                {
                    "Delete": {
                        "TableName": self.keys_table_name,
                        "Key": {"record_key": {"S": self._key_of(previous)}},
                    }
                }
            )

        result = dynamodb_next.transact_write_items(TransactItems=transact_items)
        _raise_for_result(result, "transact_write_items", record_id=record.id)

        logger.debug(
            "retry_record_upserted",
            record_id=record.id,
            state=record.state.value,
            attempt_count=record.attempt_count,
        )
        return record

    def fetch_due(self, now: datetime) -> List[RetryRecord]:
        result = dynamodb_next.query(
            table_name=self.table_name,
            IndexName=DUE_INDEX_NAME,
            KeyConditionExpression="#state = :state AND next_eligible_at_ms <= :now",
            ExpressionAttributeNames={"#state": "state"},
            ExpressionAttributeValues={
                ":state": {"S": RetryState.PENDING.value},
                ":now": {"N": str(_epoch_ms(now))},
            },
        )
        _raise_for_result(result, "query", index=DUE_INDEX_NAME)

        items = result.data or []
        due = []
        for item in items:
            try:
                record = self._item_to_record(item)
            except ValueError as e:
                logger.error(
                    "retry_record_malformed",
                    record_id=_get_value(item.get("record_id")),
                    error=str(e),
                )
                continue
            # The index may lag the table; drop anything that is no longer due
            if record.is_due(now):
                due.append(record)

        logger.debug(
            "fetched_due_retry_records",
            count=len(due),
            total_queried=len(items),
        )
        return due

    def _key_of(self, record: RetryRecord) -> str:
        return _record_key(record.entity_key, record.task_type)

    def _key_item(self, record: RetryRecord) -> Dict[str, Any]:
        return {
            "record_key": {"S": self._key_of(record)},
            "record_id": {"S": record.id},
        }

    def _record_to_item(self, record: RetryRecord) -> Dict[str, Any]:
        item = {
            "record_id": {"S": record.id},
            "entity_key": {"S": record.entity_key},
            "task_type": {"S": record.task_type},
            "request_payload": {"S": json.dumps(record.request_payload)},
            "response_payload": {"S": json.dumps(record.response_payload)},
            "state": {"S": record.state.value},
            "attempt_count": {"N": str(record.attempt_count)},
            "created_at": {"S": record.created_at.isoformat()},
            "next_eligible_at": {"S": record.next_eligible_at.isoformat()},
            "next_eligible_at_ms": {"N": str(_epoch_ms(record.next_eligible_at))},
        }
        if record.last_attempt_at:
            item["last_attempt_at"] = {"S": record.last_attempt_at.isoformat()}
        return item

    def _item_to_record(self, item: Dict[str, Any]) -> RetryRecord:
        """Convert a DynamoDB item (with type descriptors) to a RetryRecord."""
        return RetryRecord.from_dict(
            {
                "id": _get_value(item.get("record_id")),
                "entity_key": _get_value(item.get("entity_key")),
                "task_type": _get_value(item.get("task_type")),
                "request_payload": json.loads(
                    _get_value(item.get("request_payload"), "{}")
                ),
                "response_payload": json.loads(
                    _get_value(item.get("response_payload"), "{}")
                ),
                "state": _get_value(item.get("state")),
                "attempt_count": int(_get_value(item.get("attempt_count"), 0)),
                "created_at": _get_value(item.get("created_at")),
                "last_attempt_at": _get_value(item.get("last_attempt_at")),
                "next_eligible_at": _get_value(item.get("next_eligible_at")),
            }
        )


class DynamoDBRetryPolicyStore:
    """RetryPolicyStore backed by a DynamoDB table keyed by task_type."""

    def __init__(self, table_name: str):
        self.table_name = table_name

    def get(self, task_type: str) -> Optional[RetryPolicy]:
        result = dynamodb_next.get_item(
            table_name=self.table_name,
            Key={"task_type": {"S": task_type}},
        )
        _raise_for_result(result, "get_item", task_type=task_type)

        item = (result.data or {}).get("Item")
        if not item:
            return None
        return RetryPolicy(
            task_type=_get_value(item.get("task_type")),
            max_attempts=int(_get_value(item.get("max_attempts"))),
            retry_interval_minutes=int(_get_value(item.get("retry_interval_minutes"))),
        )

    def put(self, policy: RetryPolicy) -> RetryPolicy:
        result = dynamodb_next.put_item(
            table_name=self.table_name,
            Item={
                "task_type": {"S": policy.task_type},
                "max_attempts": {"N": str(policy.max_attempts)},
                "retry_interval_minutes": {"N": str(policy.retry_interval_minutes)},
            },
        )
        _raise_for_result(result, "put_item", task_type=policy.task_type)

        logger.info(
            "retry_policy_saved",
            task_type=policy.task_type,
            max_attempts=policy.max_attempts,
            retry_interval_minutes=policy.retry_interval_minutes,
        )
        return policy
