"""Retry engine models.

Immutable value types for the retry lifecycle: the record tracking one unit
of retryable work, the per-task-type policy and the outcome codes returned by
evaluators. Transitions never mutate a record; they produce a replacement
value with ``dataclasses.replace`` which the store then writes in full.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class RetryState(str, Enum):
    """Lifecycle state of a retry record.

    Values:
        PENDING: Not yet resolved, picked up by the scheduler when due
        CLOSED: Terminal success
        FAILED: Terminal failure (rejected, invalid, or attempt budget exhausted)
    """

    PENDING = "PENDING"
    CLOSED = "CLOSED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not RetryState.PENDING


class OutcomeCode(Enum):
    """Result of attempting the underlying operation.

    Each code carries the HTTP-like status and message recorded in the
    record's response payload.
    """

    SUCCESS = (200, "Student enrolled successfully")
    CONFLICT = (409, "Student already enrolled")
    SERVER_ERROR = (500, "Internal error")
    INVALID_INPUT = (400, "Unhandled entity key pattern")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]

    @classmethod
    def coerce(cls, value: Any) -> "OutcomeCode":
        """Return ``value`` as an OutcomeCode; anything unrecognized is INVALID_INPUT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        return cls.INVALID_INPUT

    def to_payload(self) -> Dict[str, Any]:
        """Response payload stored on the record for this outcome."""
        return {
            "outcome": self.name,
            "status": self.status_code,
            "message": self.message,
        }


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy for one task type.

    Attributes:
        task_type: Lookup key
        max_attempts: Ceiling on attempt_count before forced terminal failure
        retry_interval_minutes: Delay applied to next_eligible_at after each
            scheduler evaluation that leaves the record PENDING
    """

    task_type: str
    max_attempts: int
    retry_interval_minutes: int

    def __post_init__(self) -> None:
        """Validate policy values."""
        if not self.task_type:
            raise ValueError("task_type is required")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retry_interval_minutes < 0:
            raise ValueError("retry_interval_minutes must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_type": self.task_type,
            "max_attempts": self.max_attempts,
            "retry_interval_minutes": self.retry_interval_minutes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RetryPolicy":
        return cls(
            task_type=data["task_type"],
            max_attempts=int(data["max_attempts"]),
            retry_interval_minutes=int(data["retry_interval_minutes"]),
        )


@dataclass(frozen=True)
class RetryRecord:
    """One retryable unit of work for an (entity_key, task_type) pair.

    Fields:
        entity_key: Subject being retried (e.g. a student's entity key)
        task_type: Logical category of work (e.g. "CBSE_ONBOARDING")
        request_payload: Original input, captured at creation
        response_payload: Most recent outcome, replaced on every attempt
        state: PENDING, CLOSED or FAILED
        id: Opaque identifier assigned at creation
        attempt_count: Scheduler evaluations so far (intake does not count)
        created_at: Creation time
        last_attempt_at: Time of the latest evaluation
        next_eligible_at: Earliest time the scheduler may pick the record up

    Example:
        record = RetryRecord(
            entity_key="099999999902",
            task_type="CBSE_ONBOARDING",
            request_payload={"entityKey": "099999999902", "name": "Joe"},
            response_payload=OutcomeCode.SERVER_ERROR.to_payload(),
            state=RetryState.PENDING,
        )
    """

    entity_key: str
    task_type: str
    request_payload: Dict[str, Any]
    response_payload: Dict[str, Any] = field(default_factory=dict)
    state: RetryState = RetryState.PENDING
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    attempt_count: int = 0
    created_at: datetime = field(default_factory=utc_now)
    last_attempt_at: Optional[datetime] = None
    next_eligible_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Validate required fields."""
        if not self.id:
            raise ValueError("id is required")
        if not self.entity_key:
            raise ValueError("entity_key is required")
        if not self.task_type:
            raise ValueError("task_type is required")
        if not isinstance(self.request_payload, dict):
            raise ValueError("request_payload must be a dictionary")
        if not isinstance(self.response_payload, dict):
            raise ValueError("response_payload must be a dictionary")
        if self.attempt_count < 0:
            raise ValueError("attempt_count must be >= 0")
        # Accept the raw string value for records loaded from storage
        if not isinstance(self.state, RetryState):
            object.__setattr__(self, "state", RetryState(self.state))

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def is_due(self, now: datetime) -> bool:
        """True when the scheduler may evaluate this record at ``now``."""
        return self.state is RetryState.PENDING and self.next_eligible_at <= now

    def with_attempt(
        self,
        outcome: OutcomeCode,
        state: RetryState,
        attempted_at: datetime,
        next_eligible_at: Optional[datetime] = None,
    ) -> "RetryRecord":
        """Return the record as it stands after one scheduler evaluation."""
        return replace(
            self,
            response_payload=outcome.to_payload(),
            state=state,
            attempt_count=self.attempt_count + 1,
            last_attempt_at=attempted_at,
            next_eligible_at=next_eligible_at or self.next_eligible_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with ISO-8601 timestamps and the state's string value."""
        return {
            "id": self.id,
            "entity_key": self.entity_key,
            "task_type": self.task_type,
            "request_payload": dict(self.request_payload),
            "response_payload": dict(self.response_payload),
            "state": self.state.value,
            "attempt_count": self.attempt_count,
            "created_at": self.created_at.isoformat(),
            "last_attempt_at": (
                self.last_attempt_at.isoformat() if self.last_attempt_at else None
            ),
            "next_eligible_at": self.next_eligible_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RetryRecord":
        """Deserialize a record produced by ``to_dict``.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        try:
            last_attempt_at = data.get("last_attempt_at")
            return cls(
                id=data["id"],
                entity_key=data["entity_key"],
                task_type=data["task_type"],
                request_payload=dict(data.get("request_payload") or {}),
                response_payload=dict(data.get("response_payload") or {}),
                state=RetryState(data["state"]),
                attempt_count=int(data.get("attempt_count", 0)),
                created_at=_parse_timestamp(data["created_at"]),
                last_attempt_at=(
                    _parse_timestamp(last_attempt_at) if last_attempt_at else None
                ),
                next_eligible_at=_parse_timestamp(data["next_eligible_at"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid retry record data: {e}") from e
