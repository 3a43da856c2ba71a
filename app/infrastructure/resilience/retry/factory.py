"""Factories for creating retry stores based on configuration."""

from typing import TYPE_CHECKING

import structlog

from infrastructure.resilience.retry.dynamodb_store import (
    DynamoDBRetryPolicyStore,
    DynamoDBRetryRecordStore,
)
from infrastructure.resilience.retry.models import RetryPolicy
from infrastructure.resilience.retry.policy_store import (
    InMemoryRetryPolicyStore,
    RetryPolicyStore,
)
from infrastructure.resilience.retry.store import (
    InMemoryRetryRecordStore,
    RetryRecordStore,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


def create_retry_record_store(
    settings: "Settings", backend: str | None = None
) -> RetryRecordStore:
    """Create the retry record store for the configured backend.

    Args:
        settings: Application settings
        backend: Optional backend override ("memory", "dynamodb").
            If None, uses settings.retry.backend

    Returns:
        RetryRecordStore implementation

    Raises:
        ValueError: If an unknown backend is specified

    Examples:
        >>> store = create_retry_record_store(settings)
        >>> store = create_retry_record_store(settings, backend="memory")
    """
    backend = backend or settings.retry.backend

    if backend == "memory":
        logger.info("creating_in_memory_retry_record_store")
        return InMemoryRetryRecordStore()

    if backend == "dynamodb":
        logger.info(
            "creating_dynamodb_retry_record_store",
            table_name=settings.retry.records_table_name,
            keys_table_name=settings.retry.record_keys_table_name,
        )
        return DynamoDBRetryRecordStore(
            table_name=settings.retry.records_table_name,
            keys_table_name=settings.retry.record_keys_table_name,
        )

    raise ValueError(f"Unknown retry backend: {backend}. Supported: memory, dynamodb")


def create_retry_policy_store(
    settings: "Settings", backend: str | None = None
) -> RetryPolicyStore:
    """Create the retry policy store for the configured backend.

    The in-memory store is seeded from ``settings.retry.policies``; the
    DynamoDB store reads whatever the policies table holds.

    Raises:
        ValueError: If an unknown backend is specified or a seeded policy is invalid
    """
    backend = backend or settings.retry.backend

    if backend == "memory":
        policies = [
            RetryPolicy(
                task_type=task_type,
                max_attempts=int(values["max_attempts"]),
                retry_interval_minutes=int(values["retry_interval_minutes"]),
            )
            for task_type, values in settings.retry.policies.items()
        ]
        logger.info(
            "creating_in_memory_retry_policy_store",
            task_types=[policy.task_type for policy in policies],
        )
        return InMemoryRetryPolicyStore(policies)

    if backend == "dynamodb":
        logger.info(
            "creating_dynamodb_retry_policy_store",
            table_name=settings.retry.policies_table_name,
        )
        return DynamoDBRetryPolicyStore(table_name=settings.retry.policies_table_name)

    raise ValueError(f"Unknown retry backend: {backend}. Supported: memory, dynamodb")
