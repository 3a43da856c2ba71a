"""Retry record storage.

Storage interface and in-memory implementation for retry records. The
protocol-based design allows several backends (in-memory, DynamoDB) behind the
same contract:

- records are addressed by their generated ``id``;
- at most one record exists per (entity_key, task_type): ``create`` is a
  conditional insert that raises DuplicateRetryRecordError;
- ``fetch_due`` only ever returns PENDING records, so terminal records are
  structurally excluded from scheduler runs.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry.errors import DuplicateRetryRecordError
from infrastructure.resilience.retry.models import RetryRecord, RetryState

logger = get_module_logger()


class RetryRecordStore(Protocol):
    """Storage interface for retry records.

    Methods:
        get: Point lookup by record id
        find_by_entity: Point lookup by (entity_key, task_type)
        create: Insert a new record unless the pair already has one
        upsert: Write a record by id, replacing any previous value
        fetch_due: PENDING records whose next_eligible_at has passed
    """

    def get(self, record_id: str) -> Optional[RetryRecord]:
        """Return the record with ``record_id`` or None."""
        ...

    def find_by_entity(self, entity_key: str, task_type: str) -> Optional[RetryRecord]:
        """Return the record for the (entity_key, task_type) pair or None."""
        ...

    def create(self, record: RetryRecord) -> RetryRecord:
        """Insert a new record.

        Raises:
            DuplicateRetryRecordError: If a record exists for the same pair
        """
        ...

    def upsert(self, record: RetryRecord) -> RetryRecord:
        """Write ``record`` by id, fully replacing any previous value.

        A different record already holding the same (entity_key, task_type)
        pair is replaced as well.
        """
        ...

    def fetch_due(self, now: datetime) -> List[RetryRecord]:
        """Return all PENDING records with ``next_eligible_at <= now``."""
        ...


class InMemoryRetryRecordStore:
    """Thread-safe in-memory implementation of RetryRecordStore.

    Suitable for single-instance deployments, development and tests. The
    (entity_key, task_type) index is updated under the same lock as the
    records, which makes ``create`` atomic.
    """

    def __init__(self) -> None:
        self._records: Dict[str, RetryRecord] = {}
        self._keys: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def get(self, record_id: str) -> Optional[RetryRecord]:
        with self._lock:
            return self._records.get(record_id)

    def find_by_entity(self, entity_key: str, task_type: str) -> Optional[RetryRecord]:
        with self._lock:
            record_id = self._keys.get((entity_key, task_type))
            if record_id is None:
                return None
            return self._records.get(record_id)

    def create(self, record: RetryRecord) -> RetryRecord:
        with self._lock:
            key = (record.entity_key, record.task_type)
            if key in self._keys:
                logger.info(
                    "retry_record_create_conflict",
                    entity_key=record.entity_key,
                    task_type=record.task_type,
                    existing_record_id=self._keys[key],
                )
                raise DuplicateRetryRecordError(record.entity_key, record.task_type)

            self._records[record.id] = record
            self._keys[key] = record.id
            logger.info(
                "retry_record_created",
                record_id=record.id,
                entity_key=record.entity_key,
                task_type=record.task_type,
                state=record.state.value,
            )
            return record

    def upsert(self, record: RetryRecord) -> RetryRecord:
        with self._lock:
            previous = self._records.get(record.id)
            if previous is not None and (
                previous.entity_key,
                previous.task_type,
            ) != (record.entity_key, record.task_type):
                self._keys.pop((previous.entity_key, previous.task_type), None)

            # The pair keeps a single record: a different record holding it is replaced
            key = (record.entity_key, record.task_type)
            displaced_id = self._keys.get(key)
            if displaced_id is not None and displaced_id != record.id:
                self._records.pop(displaced_id, None)
                logger.info(
                    "retry_record_replaced",
                    record_id=record.id,
                    replaced_record_id=displaced_id,
                )

            self._records[record.id] = record
            self._keys[key] = record.id
            logger.debug(
                "retry_record_upserted",
                record_id=record.id,
                state=record.state.value,
                attempt_count=record.attempt_count,
            )
            return record

    def fetch_due(self, now: datetime) -> List[RetryRecord]:
        with self._lock:
            due = [
                record
                for record in self._records.values()
                if record.state is RetryState.PENDING and record.next_eligible_at <= now
            ]
            due.sort(key=lambda r: r.next_eligible_at)
            logger.debug(
                "fetched_due_retry_records",
                count=len(due),
                total_store_size=len(self._records),
            )
            return due

    def get_stats(self) -> Dict[str, int]:
        """Count records per state (for monitoring)."""
        with self._lock:
            stats = {state.value: 0 for state in RetryState}
            for record in self._records.values():
                stats[record.state.value] += 1
            return stats
