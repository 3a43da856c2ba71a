"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.configuration import Settings
from infrastructure.resilience.retry import RetryPolicyStore, RetryRecordStore
from infrastructure.services.providers import (
    get_retry_policy_store,
    get_retry_record_store,
    get_settings,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Retry stores, shared with the intake path and the scheduler
RetryRecordStoreDep = Annotated[RetryRecordStore, Depends(get_retry_record_store)]
RetryPolicyStoreDep = Annotated[RetryPolicyStore, Depends(get_retry_policy_store)]

__all__ = [
    "SettingsDep",
    "RetryRecordStoreDep",
    "RetryPolicyStoreDep",
]
