"""Unit tests for the onboarding intake path."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from infrastructure.resilience.retry import (
    DuplicateRetryRecordError,
    EvaluatorUnavailableError,
    OutcomeCode,
    RetryState,
    RetryStoreError,
)
from tests.fakes import BASE_TIME, StubEvaluator

pytestmark = pytest.mark.unit


class TestOnOnboardingEvent:
    """Tests for OnboardingIntake.on_onboarding_event."""

    @pytest.mark.parametrize(
        "outcome,state",
        [
            (OutcomeCode.SUCCESS, RetryState.CLOSED),
            (OutcomeCode.CONFLICT, RetryState.FAILED),
            (OutcomeCode.SERVER_ERROR, RetryState.PENDING),
            (OutcomeCode.INVALID_INPUT, RetryState.FAILED),
        ],
    )
    def test_creates_record_in_initial_state(
        self, intake_factory, student_factory, record_store, outcome, state
    ):
        student = student_factory("099999999902")

        intake_factory(StubEvaluator(outcome)).on_onboarding_event(student)

        record = record_store.find_by_entity("099999999902", "CBSE_ONBOARDING")
        assert record.state is state
        assert record.attempt_count == 0
        assert record.response_payload == outcome.to_payload()

    def test_record_fields(self, intake_factory, student_factory, record_store):
        student = student_factory("099999999902", school="XYZ School")

        intake_factory(StubEvaluator(OutcomeCode.SERVER_ERROR)).on_onboarding_event(
            student
        )

        record = record_store.find_by_entity("099999999902", "CBSE_ONBOARDING")
        assert record.created_at == BASE_TIME
        assert record.last_attempt_at == BASE_TIME
        assert record.next_eligible_at == BASE_TIME + timedelta(seconds=60)
        assert record.request_payload == student.to_payload()
        assert record.request_payload["school"] == "XYZ School"

    def test_configured_task_type(self, intake_factory, student_factory, record_store):
        intake = intake_factory(StubEvaluator(), task_type="STATE_ONBOARDING")

        intake.on_onboarding_event(student_factory("099999999900"))

        assert record_store.find_by_entity("099999999900", "STATE_ONBOARDING")
        assert record_store.find_by_entity("099999999900", "CBSE_ONBOARDING") is None

    def test_duplicate_event_is_noop(
        self, intake_factory, student_factory, record_store
    ):
        """The second delivery neither evaluates nor writes."""
        evaluator = StubEvaluator(OutcomeCode.SERVER_ERROR)
        intake = intake_factory(evaluator)
        student = student_factory("099999999902")

        intake.on_onboarding_event(student)
        first = record_store.find_by_entity("099999999902", "CBSE_ONBOARDING")
        intake.on_onboarding_event(student)

        assert evaluator.calls == ["099999999902"]
        assert record_store.find_by_entity("099999999902", "CBSE_ONBOARDING") == first
        assert record_store.get_stats()["PENDING"] == 1

    def test_duplicate_of_terminal_record_is_noop(
        self, intake_factory, student_factory, record_store
    ):
        intake = intake_factory(StubEvaluator(OutcomeCode.SUCCESS))
        student = student_factory("099999999900")

        intake.on_onboarding_event(student)
        intake.on_onboarding_event(student)

        assert sum(record_store.get_stats().values()) == 1

    def test_lost_create_race_is_absorbed(self, intake_factory, student_factory):
        store = MagicMock()
        store.find_by_entity.return_value = None
        store.create.side_effect = DuplicateRetryRecordError(
            "099999999902", "CBSE_ONBOARDING"
        )
        intake = intake_factory(StubEvaluator(), record_store=store)

        intake.on_onboarding_event(student_factory("099999999902"))

        store.create.assert_called_once()

    def test_store_error_is_absorbed(self, intake_factory, student_factory):
        store = MagicMock()
        store.find_by_entity.side_effect = RetryStoreError("timeout")
        intake = intake_factory(StubEvaluator(), record_store=store)

        intake.on_onboarding_event(student_factory())

        store.create.assert_not_called()

    def test_evaluator_unavailable_creates_nothing(
        self, intake_factory, student_factory, record_store
    ):
        intake = intake_factory(StubEvaluator(EvaluatorUnavailableError("down")))

        intake.on_onboarding_event(student_factory("099999999902"))

        assert record_store.find_by_entity("099999999902", "CBSE_ONBOARDING") is None

    def test_unrecognized_outcome_fails(
        self, intake_factory, student_factory, record_store
    ):
        intake_factory(StubEvaluator("WHATEVER")).on_onboarding_event(
            student_factory("099999999900")
        )

        record = record_store.find_by_entity("099999999900", "CBSE_ONBOARDING")
        assert record.state is RetryState.FAILED
