"""Retry lifecycle engine.

Tracks retryable units of work as immutable records that move from PENDING to
one of the terminal states CLOSED or FAILED, and re-evaluates due records on
a fixed period.

Architecture:
- RetryRecord / RetryPolicy / OutcomeCode / RetryState: value types
- next_state: the transition table shared by intake and scheduler
- OutcomeEvaluator: protocol for the (simulated or real) external call
- RetryRecordStore / RetryPolicyStore: storage protocols with in-memory and
  DynamoDB implementations
- RetryScheduler: periodic batch re-evaluation

Usage:
    from infrastructure.resilience.retry import (
        InMemoryRetryPolicyStore,
        InMemoryRetryRecordStore,
        RetryPolicy,
        RetryScheduler,
    )

    records = InMemoryRetryRecordStore()
    policies = InMemoryRetryPolicyStore(
        [RetryPolicy("CBSE_ONBOARDING", max_attempts=3, retry_interval_minutes=1)]
    )
    scheduler = RetryScheduler(records, policies, evaluator)

    stats = scheduler.run()
"""

from infrastructure.resilience.retry.errors import (
    DuplicateRetryRecordError,
    EvaluatorUnavailableError,
    RetryError,
    RetryStoreError,
)
from infrastructure.resilience.retry.evaluator import OutcomeEvaluator
from infrastructure.resilience.retry.factory import (
    create_retry_policy_store,
    create_retry_record_store,
)
from infrastructure.resilience.retry.models import (
    OutcomeCode,
    RetryPolicy,
    RetryRecord,
    RetryState,
    utc_now,
)
from infrastructure.resilience.retry.policy_store import (
    InMemoryRetryPolicyStore,
    RetryPolicyStore,
)
from infrastructure.resilience.retry.scheduler import RetryScheduler
from infrastructure.resilience.retry.store import (
    InMemoryRetryRecordStore,
    RetryRecordStore,
)
from infrastructure.resilience.retry.transitions import next_state

__all__ = [
    # Models
    "OutcomeCode",
    "RetryPolicy",
    "RetryRecord",
    "RetryState",
    "utc_now",
    # State machine
    "next_state",
    # Errors
    "RetryError",
    "DuplicateRetryRecordError",
    "RetryStoreError",
    "EvaluatorUnavailableError",
    # Evaluator
    "OutcomeEvaluator",
    # Stores
    "RetryRecordStore",
    "InMemoryRetryRecordStore",
    "RetryPolicyStore",
    "InMemoryRetryPolicyStore",
    # Scheduler
    "RetryScheduler",
    # Factories
    "create_retry_record_store",
    "create_retry_policy_store",
]
