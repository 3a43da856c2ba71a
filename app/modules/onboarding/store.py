"""Student storage keyed by entity key.

Students are saved before their onboarding event is published, so a student
with a retry record can always be looked up. ``save`` replaces any student
already stored under the same entity key.

DynamoDB table layout:

    students (PK: entity_key)
        payload (camelCase JSON of the onboarding request), saved_at (ISO)
"""

import json
import threading
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

from pydantic import ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.resilience.retry import utc_now
from integrations.aws import dynamodb_next
from modules.onboarding.schemas import StudentOnboarding

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


class StudentStoreError(Exception):
    """Raised when the student backend cannot complete an operation."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


class StudentStore(Protocol):
    """Point lookup and save of students by entity key."""

    def get(self, entity_key: str) -> Optional[StudentOnboarding]:
        """Return the student stored under ``entity_key`` or None."""
        ...

    def save(self, student: StudentOnboarding) -> StudentOnboarding:
        """Create or replace the student stored under ``student.entity_key``."""
        ...


class InMemoryStudentStore:
    """Thread-safe in-memory StudentStore."""

    def __init__(self) -> None:
        self._students: Dict[str, StudentOnboarding] = {}
        self._lock = threading.Lock()

    def get(self, entity_key: str) -> Optional[StudentOnboarding]:
        with self._lock:
            return self._students.get(entity_key)

    def save(self, student: StudentOnboarding) -> StudentOnboarding:
        with self._lock:
            self._students[student.entity_key] = student
        logger.info(
            "student_saved",
            entity_key=student.entity_key,
            roll_no=student.roll_no,
        )
        return student


def _raise_for_result(result: OperationResult, operation: str, **context) -> None:
    if result.is_success:
        return
    logger.error(
        "dynamodb_student_store_operation_failed",
        operation=operation,
        error=result.message,
        error_code=result.error_code,
        **context,
    )
    raise StudentStoreError(
        f"DynamoDB {operation} failed: {result.message}", error_code=result.error_code
    )


class DynamoDBStudentStore:
    """StudentStore backed by a DynamoDB table keyed by entity_key."""

    def __init__(self, table_name: str):
        self.table_name = table_name

    def get(self, entity_key: str) -> Optional[StudentOnboarding]:
        result = dynamodb_next.get_item(
            table_name=self.table_name,
            Key={"entity_key": {"S": entity_key}},
            ConsistentRead=True,
        )
        _raise_for_result(result, "get_item", entity_key=entity_key)

        item = (result.data or {}).get("Item")
        if not item:
            return None
        return self._item_to_student(item)

    def save(self, student: StudentOnboarding) -> StudentOnboarding:
        result = dynamodb_next.put_item(
            table_name=self.table_name,
            Item={
                "entity_key": {"S": student.entity_key},
                "payload": {"S": json.dumps(student.to_payload())},
                "saved_at": {"S": utc_now().isoformat()},
            },
        )
        _raise_for_result(result, "put_item", entity_key=student.entity_key)

        logger.info(
            "student_saved",
            entity_key=student.entity_key,
            roll_no=student.roll_no,
        )
        return student

    def _item_to_student(self, item: Dict[str, Any]) -> StudentOnboarding:
        payload = item.get("payload", {}).get("S", "{}")
        try:
            return StudentOnboarding.model_validate(json.loads(payload))
        except (ValueError, ValidationError) as e:
            entity_key = item.get("entity_key", {}).get("S")
            logger.error("student_item_malformed", entity_key=entity_key, error=str(e))
            raise StudentStoreError(f"Malformed student item {entity_key}") from e


def create_student_store(
    settings: "Settings", backend: Optional[str] = None
) -> StudentStore:
    """Create the student store for the configured backend.

    Args:
        settings: Application settings
        backend: Optional backend override ("memory", "dynamodb").
            If None, uses settings.onboarding.store_backend

    Raises:
        ValueError: If an unknown backend is specified
    """
    backend = backend or settings.onboarding.store_backend

    if backend == "memory":
        logger.info("creating_in_memory_student_store")
        return InMemoryStudentStore()

    if backend == "dynamodb":
        logger.info(
            "creating_dynamodb_student_store",
            table_name=settings.onboarding.students_table_name,
        )
        return DynamoDBStudentStore(table_name=settings.onboarding.students_table_name)

    raise ValueError(
        f"Unknown student store backend: {backend}. Supported: memory, dynamodb"
    )
