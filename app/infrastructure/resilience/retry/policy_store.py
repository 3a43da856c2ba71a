"""Retry policy storage: task type -> RetryPolicy lookup."""

import threading
from typing import Dict, Iterable, Optional, Protocol

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry.models import RetryPolicy

logger = get_module_logger()


class RetryPolicyStore(Protocol):
    """Key-value lookup from task type to RetryPolicy."""

    def get(self, task_type: str) -> Optional[RetryPolicy]:
        """Return the policy for ``task_type`` or None when not configured."""
        ...

    def put(self, policy: RetryPolicy) -> RetryPolicy:
        """Create or replace the policy for ``policy.task_type``."""
        ...


class InMemoryRetryPolicyStore:
    """Thread-safe in-memory RetryPolicyStore, optionally seeded at construction."""

    def __init__(self, policies: Optional[Iterable[RetryPolicy]] = None) -> None:
        self._policies: Dict[str, RetryPolicy] = {}
        self._lock = threading.Lock()
        for policy in policies or []:
            self._policies[policy.task_type] = policy

    def get(self, task_type: str) -> Optional[RetryPolicy]:
        with self._lock:
            return self._policies.get(task_type)

    def put(self, policy: RetryPolicy) -> RetryPolicy:
        with self._lock:
            self._policies[policy.task_type] = policy
        logger.info(
            "retry_policy_saved",
            task_type=policy.task_type,
            max_attempts=policy.max_attempts,
            retry_interval_minutes=policy.retry_interval_minutes,
        )
        return policy
