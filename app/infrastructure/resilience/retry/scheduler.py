"""Periodic retry scheduler.

Each run re-evaluates every due PENDING record, applies the transition table
and writes the replacement record back. The scheduler is driven only by the
periodic job; nothing else calls ``run``.
"""

import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

import structlog

from infrastructure.resilience.retry.errors import EvaluatorUnavailableError
from infrastructure.resilience.retry.evaluator import OutcomeEvaluator
from infrastructure.resilience.retry.models import (
    OutcomeCode,
    RetryRecord,
    RetryState,
    utc_now,
)
from infrastructure.resilience.retry.policy_store import RetryPolicyStore
from infrastructure.resilience.retry.store import RetryRecordStore
from infrastructure.resilience.retry.transitions import next_state

logger = structlog.get_logger()


def _empty_stats() -> Dict[str, int]:
    return {
        "eligible": 0,
        "processed": 0,
        "closed": 0,
        "failed": 0,
        "pending": 0,
        "skipped": 0,
        "errors": 0,
    }


class RetryScheduler:
    """Re-evaluates due retry records on every run.

    Per run:
    - fetch all PENDING records whose next_eligible_at has passed
    - skip records whose task type has no policy (left untouched)
    - re-read the record, evaluate its entity key and apply the transition
      table with the pre-increment attempt_count
    - write the replacement record

    A failure on one record is logged and never aborts the run. Runs never
    overlap: a run that starts while another is in progress is skipped.

    Attributes:
        record_store: RetryRecordStore holding the records
        policy_store: RetryPolicyStore resolving task types to policies
        evaluator: OutcomeEvaluator standing in for the external call
        clock: Callable returning the current aware UTC datetime
    """

    def __init__(
        self,
        record_store: RetryRecordStore,
        policy_store: RetryPolicyStore,
        evaluator: OutcomeEvaluator,
        clock: Callable[[], datetime] = utc_now,
        scheduler_id: str = "retry-scheduler-1",
    ) -> None:
        self.record_store = record_store
        self.policy_store = policy_store
        self.evaluator = evaluator
        self.clock = clock
        self.scheduler_id = scheduler_id
        self._run_lock = threading.Lock()
        self.log = logger.bind(component="retry_scheduler", scheduler_id=scheduler_id)

    def run(self) -> Optional[Dict[str, int]]:
        """Process every due record once.

        Returns:
            Processing statistics, or None when the run was skipped because a
            previous run is still in progress:
                - eligible: records returned by the due query
                - processed: records evaluated and written back
                - closed / failed / pending: resulting states of processed records
                - skipped: records left untouched (no policy, already resolved)
                - errors: records whose processing failed
        """
        if not self._run_lock.acquire(blocking=False):
            self.log.warning("retry_run_skipped_overlap")
            return None

        try:
            return self._run()
        finally:
            self._run_lock.release()

    def _run(self) -> Dict[str, int]:
        now = self.clock()
        stats = _empty_stats()

        records = self.record_store.fetch_due(now)
        stats["eligible"] = len(records)

        if not records:
            self.log.debug("retry_run_no_records")
            return stats

        self.log.info("retry_run_start", record_count=len(records))

        for record in records:
            try:
                updated = self._process_record(record, now)
            except EvaluatorUnavailableError as e:
                self.log.warning(
                    "retry_record_evaluator_unavailable",
                    record_id=record.id,
                    entity_key=record.entity_key,
                    error=str(e),
                )
                stats["errors"] += 1
                continue
            except Exception as e:  # pylint: disable=broad-except
                self.log.error(
                    "retry_record_processing_failed",
                    record_id=record.id,
                    task_type=record.task_type,
                    error=str(e),
                    exc_info=True,
                )
                stats["errors"] += 1
                continue

            if updated is None:
                stats["skipped"] += 1
                continue

            stats["processed"] += 1
            stats[updated.state.value.lower()] += 1

        self.log.info("retry_run_complete", **stats)
        return stats

    def _process_record(
        self, record: RetryRecord, now: datetime
    ) -> Optional[RetryRecord]:
        """Evaluate one record and write its replacement.

        Returns:
            The written record, or None when the record was left untouched
        """
        policy = self.policy_store.get(record.task_type)
        if policy is None:
            self.log.warning(
                "retry_policy_missing",
                record_id=record.id,
                task_type=record.task_type,
            )
            return None

        # Read-modify-write: another scheduler may have resolved it since the query
        current = self.record_store.get(record.id)
        if current is None or current.state is not RetryState.PENDING:
            self.log.info(
                "retry_record_no_longer_pending",
                record_id=record.id,
                state=current.state.value if current else None,
            )
            return None

        outcome = OutcomeCode.coerce(self.evaluator.evaluate(current.entity_key))
        state = next_state(outcome, current.attempt_count, policy.max_attempts)

        next_eligible_at = None
        if state is RetryState.PENDING:
            next_eligible_at = now + timedelta(minutes=policy.retry_interval_minutes)

        updated = current.with_attempt(
            outcome=outcome,
            state=state,
            attempted_at=now,
            next_eligible_at=next_eligible_at,
        )
        self.record_store.upsert(updated)

        if outcome is OutcomeCode.SERVER_ERROR and state is RetryState.FAILED:
            self.log.info(
                "retry_budget_exhausted",
                record_id=updated.id,
                entity_key=updated.entity_key,
                attempt_count=updated.attempt_count,
                max_attempts=policy.max_attempts,
            )
        else:
            self.log.info(
                "retry_record_evaluated",
                record_id=updated.id,
                entity_key=updated.entity_key,
                outcome=outcome.name,
                state=updated.state.value,
                attempt_count=updated.attempt_count,
                max_attempts=policy.max_attempts,
                next_eligible_at=updated.next_eligible_at.isoformat(),
            )
        return updated
