import sys
from datetime import datetime, timedelta
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.configuration`) works during pytest collection.
project_root = str(Path(__file__).resolve().parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402

from infrastructure.events import clear_handlers, shutdown_event_executor  # noqa: E402
from infrastructure.resilience.retry import (  # noqa: E402
    InMemoryRetryPolicyStore,
    InMemoryRetryRecordStore,
    RetryPolicy,
    RetryRecord,
    RetryState,
)
from tests.fakes import BASE_TIME, FakeClock, StubEvaluator  # noqa: E402


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stub_evaluator():
    return StubEvaluator()


@pytest.fixture
def record_store():
    return InMemoryRetryRecordStore()


@pytest.fixture
def policy_store():
    return InMemoryRetryPolicyStore(
        [RetryPolicy("CBSE_ONBOARDING", max_attempts=3, retry_interval_minutes=1)]
    )


@pytest.fixture
def retry_record_factory():
    """Factory for creating RetryRecord instances."""

    def _factory(
        entity_key: str = "099999999902",
        task_type: str = "CBSE_ONBOARDING",
        state: RetryState = RetryState.PENDING,
        attempt_count: int = 0,
        next_eligible_at: datetime = BASE_TIME,
        **kwargs,
    ) -> RetryRecord:
        kwargs.setdefault("request_payload", {"entityKey": entity_key})
        kwargs.setdefault("created_at", BASE_TIME - timedelta(minutes=1))
        return RetryRecord(
            entity_key=entity_key,
            task_type=task_type,
            state=state,
            attempt_count=attempt_count,
            next_eligible_at=next_eligible_at,
            **kwargs,
        )

    return _factory


@pytest.fixture
def clear_event_handlers():
    """Clear event handlers before and after test."""
    clear_handlers()
    yield
    clear_handlers()
    shutdown_event_executor(wait=True)
