"""API schemas for retry records and retry policies.

JSON bodies use camelCase (``entityKey``, ``attemptCount``,
``nextEligibleAt``); attributes are snake_case.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from infrastructure.resilience.retry import (
    RetryPolicy,
    RetryRecord,
    RetryState,
    utc_now,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RetryRecordSchema(CamelModel):
    """A retry record as accepted and returned by the API.

    On write, a missing ``id`` is generated and missing timestamps default to
    the current time, so a bare ``{entityKey, taskType, requestPayload}`` body
    creates a record that is due immediately.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    entity_key: str = Field(..., min_length=1)
    task_type: str = Field(..., min_length=1)
    request_payload: Dict[str, Any] = Field(default_factory=dict)
    response_payload: Dict[str, Any] = Field(default_factory=dict)
    state: RetryState = RetryState.PENDING
    attempt_count: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    last_attempt_at: Optional[datetime] = None
    next_eligible_at: Optional[datetime] = None

    @field_validator("created_at", "last_attempt_at", "next_eligible_at")
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_record(self) -> RetryRecord:
        now = utc_now()
        return RetryRecord(
            id=self.id,
            entity_key=self.entity_key,
            task_type=self.task_type,
            request_payload=dict(self.request_payload),
            response_payload=dict(self.response_payload),
            state=self.state,
            attempt_count=self.attempt_count,
            created_at=self.created_at or now,
            last_attempt_at=self.last_attempt_at,
            next_eligible_at=self.next_eligible_at or now,
        )

    @classmethod
    def from_record(cls, record: RetryRecord) -> "RetryRecordSchema":
        return cls(
            id=record.id,
            entity_key=record.entity_key,
            task_type=record.task_type,
            request_payload=dict(record.request_payload),
            response_payload=dict(record.response_payload),
            state=record.state,
            attempt_count=record.attempt_count,
            created_at=record.created_at,
            last_attempt_at=record.last_attempt_at,
            next_eligible_at=record.next_eligible_at,
        )


class RetryPolicyBody(CamelModel):
    """Body of a policy upsert; the task type comes from the path."""

    max_attempts: int = Field(..., ge=1)
    retry_interval_minutes: int = Field(..., ge=0)


class RetryPolicySchema(RetryPolicyBody):
    task_type: str

    @classmethod
    def from_policy(cls, policy: RetryPolicy) -> "RetryPolicySchema":
        return cls(
            task_type=policy.task_type,
            max_attempts=policy.max_attempts,
            retry_interval_minutes=policy.retry_interval_minutes,
        )
