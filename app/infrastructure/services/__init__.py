"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    RetryPolicyStoreDep,
    RetryRecordStoreDep,
    SettingsDep,
)
from infrastructure.services.providers import (
    get_retry_policy_store,
    get_retry_record_store,
    get_settings,
)

__all__ = [
    "SettingsDep",
    "RetryRecordStoreDep",
    "RetryPolicyStoreDep",
    "get_settings",
    "get_retry_record_store",
    "get_retry_policy_store",
]
