"""Shared fixtures for retry engine tests."""

from unittest.mock import MagicMock

import pytest

from infrastructure.operations import OperationResult


@pytest.fixture
def mock_dynamodb_next():
    """Mock dynamodb_next module for testing."""
    mock = MagicMock()

    # Default successful responses
    mock.put_item.return_value = OperationResult.success(data={})
    mock.get_item.return_value = OperationResult.success(data={})
    mock.query.return_value = OperationResult.success(data=[])
    mock.transact_write_items.return_value = OperationResult.success(data={})

    return mock


@pytest.fixture
def dynamodb_record_store(mock_dynamodb_next, monkeypatch):
    """DynamoDB retry record store with mocked dynamodb_next."""
    monkeypatch.setattr(
        "infrastructure.resilience.retry.dynamodb_store.dynamodb_next",
        mock_dynamodb_next,
    )

    from infrastructure.resilience.retry.dynamodb_store import DynamoDBRetryRecordStore

    store = DynamoDBRetryRecordStore(
        table_name="test-retry-records", keys_table_name="test-retry-record-keys"
    )
    store._mock_dynamodb_next = mock_dynamodb_next  # Attach for test access
    return store


@pytest.fixture
def dynamodb_policy_store(mock_dynamodb_next, monkeypatch):
    """DynamoDB retry policy store with mocked dynamodb_next."""
    monkeypatch.setattr(
        "infrastructure.resilience.retry.dynamodb_store.dynamodb_next",
        mock_dynamodb_next,
    )

    from infrastructure.resilience.retry.dynamodb_store import DynamoDBRetryPolicyStore

    store = DynamoDBRetryPolicyStore(table_name="test-retry-policies")
    store._mock_dynamodb_next = mock_dynamodb_next
    return store
