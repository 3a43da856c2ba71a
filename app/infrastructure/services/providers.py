"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.resilience.retry import (
    RetryPolicyStore,
    RetryRecordStore,
    create_retry_policy_store,
    create_retry_record_store,
)


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/version")
        def get_version(settings: SettingsDep):
            return {"version": settings.GIT_SHA}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_retry_record_store() -> RetryRecordStore:
    """
    Get application-scoped retry record store singleton.

    The intake path, the scheduler and the HTTP routes must share one store so
    the in-memory backend sees a single set of records.

    Returns:
        RetryRecordStore: In-memory or DynamoDB store per ``RETRY_BACKEND``.
    """
    return create_retry_record_store(get_settings())


@lru_cache
def get_retry_policy_store() -> RetryPolicyStore:
    """Get application-scoped retry policy store singleton."""
    return create_retry_policy_store(get_settings())
