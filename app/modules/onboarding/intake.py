"""Intake path for student onboarding events.

Consumes one onboarding event, evaluates it once and persists the initial
retry record. Redelivered events are absorbed: at most one record exists per
(entity_key, task_type).
"""

from datetime import datetime, timedelta
from typing import Callable

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry import (
    DuplicateRetryRecordError,
    OutcomeCode,
    OutcomeEvaluator,
    RetryRecord,
    RetryRecordStore,
    next_state,
    utc_now,
)
from modules.onboarding.schemas import StudentOnboarding

logger = get_module_logger()

DEFAULT_TASK_TYPE = "CBSE_ONBOARDING"


class OnboardingIntake:
    """Creates the initial retry record for each onboarding event.

    The initial evaluation does not count as an attempt and no attempt budget
    applies, so a SERVER_ERROR at intake always leaves the record PENDING.

    Args:
        record_store: Store receiving the new record
        evaluator: OutcomeEvaluator for the entity key
        task_type: Task type stamped on every record created here
        initial_delay_seconds: Delay before the scheduler may first pick the
            record up
        clock: Callable returning the current aware UTC datetime
    """

    def __init__(
        self,
        record_store: RetryRecordStore,
        evaluator: OutcomeEvaluator,
        task_type: str = DEFAULT_TASK_TYPE,
        initial_delay_seconds: int = 60,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.record_store = record_store
        self.evaluator = evaluator
        self.task_type = task_type
        self.initial_delay = timedelta(seconds=initial_delay_seconds)
        self.clock = clock

    def on_onboarding_event(self, event: StudentOnboarding) -> None:
        """Handle one onboarding event. Never raises."""
        try:
            self._handle(event)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "onboarding_intake_failed",
                entity_key=event.entity_key,
                task_type=self.task_type,
                error=str(e),
                exc_info=True,
            )

    def _handle(self, event: StudentOnboarding) -> None:
        existing = self.record_store.find_by_entity(event.entity_key, self.task_type)
        if existing is not None:
            self._log_duplicate(event.entity_key, existing.id)
            return

        outcome = OutcomeCode.coerce(self.evaluator.evaluate(event.entity_key))
        state = next_state(outcome, attempt_count=0)
        now = self.clock()

        record = RetryRecord(
            entity_key=event.entity_key,
            task_type=self.task_type,
            request_payload=event.to_payload(),
            response_payload=outcome.to_payload(),
            state=state,
            created_at=now,
            last_attempt_at=now,
            next_eligible_at=now + self.initial_delay,
        )

        try:
            self.record_store.create(record)
        except DuplicateRetryRecordError:
            # Lost the race against a concurrent delivery of the same event
            self._log_duplicate(event.entity_key, None)
            return

        logger.info(
            "onboarding_record_created",
            record_id=record.id,
            entity_key=record.entity_key,
            task_type=record.task_type,
            outcome=outcome.name,
            state=record.state.value,
        )

    def _log_duplicate(self, entity_key: str, record_id) -> None:
        logger.info(
            "duplicate_onboarding_event",
            entity_key=entity_key,
            task_type=self.task_type,
            record_id=record_id,
        )
