"""Unit tests for the in-memory retry policy store."""

import pytest

from infrastructure.resilience.retry import InMemoryRetryPolicyStore, RetryPolicy

pytestmark = pytest.mark.unit


class TestInMemoryRetryPolicyStore:
    def test_seeded_policy_is_returned(self, policy_store):
        policy = policy_store.get("CBSE_ONBOARDING")

        assert policy.max_attempts == 3
        assert policy.retry_interval_minutes == 1

    def test_unknown_task_type_returns_none(self, policy_store):
        assert policy_store.get("UNKNOWN") is None

    def test_put_replaces_policy(self, policy_store):
        policy_store.put(RetryPolicy("CBSE_ONBOARDING", 1, 0))

        assert policy_store.get("CBSE_ONBOARDING") == RetryPolicy("CBSE_ONBOARDING", 1, 0)

    def test_empty_store(self):
        assert InMemoryRetryPolicyStore().get("CBSE_ONBOARDING") is None
