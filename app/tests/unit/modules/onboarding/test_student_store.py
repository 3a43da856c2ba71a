"""Unit tests for the student stores."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from infrastructure.operations import OperationResult, OperationStatus
from modules.onboarding import (
    DynamoDBStudentStore,
    InMemoryStudentStore,
    StudentStoreError,
)
from modules.onboarding.store import create_student_store

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_dynamodb_next(monkeypatch):
    mock = MagicMock()
    mock.put_item.return_value = OperationResult.success(data={})
    mock.get_item.return_value = OperationResult.success(data={})
    monkeypatch.setattr("modules.onboarding.store.dynamodb_next", mock)
    return mock


@pytest.fixture
def dynamodb_student_store(mock_dynamodb_next):
    return DynamoDBStudentStore(table_name="test-students")


class TestInMemoryStudentStore:
    def test_get_unknown(self):
        assert InMemoryStudentStore().get("099999999900") is None

    def test_save_and_get(self, student_factory):
        store = InMemoryStudentStore()
        student = student_factory("099999999900")

        assert store.save(student) is student
        assert store.get("099999999900") == student

    def test_save_replaces(self, student_factory):
        store = InMemoryStudentStore()
        store.save(student_factory("099999999900", name="Asha"))
        store.save(student_factory("099999999900", name="Asha Rao"))

        assert store.get("099999999900").name == "Asha Rao"


class TestDynamoDBStudentStore:
    def test_save_writes_payload(
        self, dynamodb_student_store, mock_dynamodb_next, student_factory
    ):
        student = student_factory("099999999902")

        dynamodb_student_store.save(student)

        kwargs = mock_dynamodb_next.put_item.call_args[1]
        assert kwargs["table_name"] == "test-students"
        assert kwargs["Item"]["entity_key"] == {"S": "099999999902"}
        assert json.loads(kwargs["Item"]["payload"]["S"]) == student.to_payload()
        assert "saved_at" in kwargs["Item"]

    def test_get_round_trips_saved_item(
        self, dynamodb_student_store, mock_dynamodb_next, student_factory
    ):
        student = student_factory("099999999902", school="XYZ School")
        dynamodb_student_store.save(student)
        item = mock_dynamodb_next.put_item.call_args[1]["Item"]
        mock_dynamodb_next.get_item.return_value = OperationResult.success(
            data={"Item": item}
        )

        assert dynamodb_student_store.get("099999999902") == student
        assert mock_dynamodb_next.get_item.call_args[1]["Key"] == {
            "entity_key": {"S": "099999999902"}
        }

    def test_get_missing(self, dynamodb_student_store):
        assert dynamodb_student_store.get("099999999900") is None

    def test_get_malformed_item_raises(self, dynamodb_student_store, mock_dynamodb_next):
        mock_dynamodb_next.get_item.return_value = OperationResult.success(
            data={
                "Item": {
                    "entity_key": {"S": "099999999900"},
                    "payload": {"S": '{"entityKey": "099999999900"}'},
                }
            }
        )

        with pytest.raises(StudentStoreError):
            dynamodb_student_store.get("099999999900")

    def test_failed_save_raises(
        self, dynamodb_student_store, mock_dynamodb_next, student_factory
    ):
        mock_dynamodb_next.put_item.return_value = OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "throttled",
            error_code="ProvisionedThroughputExceededException",
        )

        with pytest.raises(StudentStoreError) as exc_info:
            dynamodb_student_store.save(student_factory())

        assert exc_info.value.error_code == "ProvisionedThroughputExceededException"


class TestCreateStudentStore:
    def _settings(self, backend):
        return SimpleNamespace(
            onboarding=SimpleNamespace(
                store_backend=backend, students_table_name="test-students"
            )
        )

    def test_memory(self):
        assert isinstance(
            create_student_store(self._settings("memory")), InMemoryStudentStore
        )

    def test_dynamodb(self):
        store = create_student_store(self._settings("dynamodb"))

        assert isinstance(store, DynamoDBStudentStore)
        assert store.table_name == "test-students"

    def test_backend_override(self):
        store = create_student_store(self._settings("dynamodb"), backend="memory")

        assert isinstance(store, InMemoryStudentStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_student_store(self._settings("redis"))
