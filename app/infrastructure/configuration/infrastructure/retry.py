"""Retry engine infrastructure settings."""

import json
from typing import Any, Dict

from pydantic import Field, field_validator

from infrastructure.configuration.base import InfrastructureSettings

DEFAULT_RETRY_POLICIES: Dict[str, Dict[str, int]] = {
    "CBSE_ONBOARDING": {"max_attempts": 3, "retry_interval_minutes": 1},
}


class RetrySettings(InfrastructureSettings):
    """Retry record storage and scheduler configuration.

    Environment Variables:
        RETRY_BACKEND: Storage backend - 'memory' or 'dynamodb' (default: memory)
        RETRY_RECORDS_TABLE_NAME: DynamoDB table holding retry records
        RETRY_RECORD_KEYS_TABLE_NAME: DynamoDB table guarding (entity, task type) uniqueness
        RETRY_POLICIES_TABLE_NAME: DynamoDB table holding retry policies
        RETRY_SCHEDULER_ENABLED: Start the periodic retry scheduler (default: True)
        RETRY_SCHEDULER_INTERVAL_SECONDS: Period of the retry scheduler (default: 60s)
        RETRY_POLICIES: JSON mapping of task type to policy, used to seed the
            in-memory policy store, e.g.
            '{"CBSE_ONBOARDING": {"max_attempts": 3, "retry_interval_minutes": 1}}'

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.retry.scheduler_enabled:
            interval = settings.retry.scheduler_interval_seconds
        ```
    """

    backend: str = Field(
        default="memory",
        alias="RETRY_BACKEND",
        description="Retry record backend: 'memory' or 'dynamodb'",
    )
    records_table_name: str = Field(
        default="retry-records",
        alias="RETRY_RECORDS_TABLE_NAME",
        description="DynamoDB table name for retry records",
    )
    record_keys_table_name: str = Field(
        default="retry-record-keys",
        alias="RETRY_RECORD_KEYS_TABLE_NAME",
        description="DynamoDB table enforcing one record per entity and task type",
    )
    policies_table_name: str = Field(
        default="retry-policies",
        alias="RETRY_POLICIES_TABLE_NAME",
        description="DynamoDB table name for retry policies",
    )
    scheduler_enabled: bool = Field(
        default=True,
        alias="RETRY_SCHEDULER_ENABLED",
        description="Run the periodic retry scheduler",
    )
    scheduler_interval_seconds: int = Field(
        default=60,
        alias="RETRY_SCHEDULER_INTERVAL_SECONDS",
        description="Seconds between two retry scheduler runs",
    )
    policies: Dict[str, Dict[str, int]] = Field(
        default_factory=lambda: dict(DEFAULT_RETRY_POLICIES),
        alias="RETRY_POLICIES",
        description="Task type to policy mapping for the in-memory policy store",
    )

    @field_validator("backend")
    @classmethod
    def _validate_backend(cls, v: str) -> str:
        if v not in ("memory", "dynamodb"):
            raise ValueError(
                f"Unknown RETRY_BACKEND: {v}. Supported: memory, dynamodb"
            )
        return v

    @field_validator("scheduler_interval_seconds")
    @classmethod
    def _validate_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("RETRY_SCHEDULER_INTERVAL_SECONDS must be at least 1")
        return v

    @field_validator("policies", mode="before")
    @classmethod
    def _parse_policies(cls, v: Any) -> Any:
        """Parse RETRY_POLICIES from a JSON string or mapping."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return v
        if isinstance(v, str):
            s = v.strip()
            if (s.startswith("'") and s.endswith("'")) or (
                s.startswith('"') and s.endswith('"')
            ):
                s = s[1:-1]
            try:
                return json.loads(s) if s else {}
            except (json.JSONDecodeError, ValueError) as e:
                raise ValueError(
                    f"Invalid RETRY_POLICIES JSON: {e} (value: {s[:80]}...)"
                ) from e
        raise ValueError("RETRY_POLICIES must be a JSON string or a mapping")
