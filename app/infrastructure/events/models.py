"""Event models for the in-process event bus."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass
class Event:
    """A message delivered to every handler registered for its type.

    Delivery is at-least-once from the handlers' point of view: the same
    payload may be published more than once, so handlers must be idempotent.
    """

    event_type: str
    """The type of event (e.g., 'student.onboarding')."""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Event payload."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    """When the event was published."""

    correlation_id: UUID = field(default_factory=uuid4)
    """Unique ID tying together the logs produced while handling this event."""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to a dictionary with ISO timestamp and string UUID."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["correlation_id"] = str(self.correlation_id)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Deserialize event from a dictionary.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        try:
            timestamp = data.get("timestamp")
            if isinstance(timestamp, str):
                timestamp = datetime.fromisoformat(timestamp)
            elif timestamp is None:
                timestamp = datetime.now(timezone.utc)

            correlation_id = data.get("correlation_id")
            if isinstance(correlation_id, str):
                correlation_id = UUID(correlation_id)
            elif correlation_id is None:
                correlation_id = uuid4()

            return cls(
                event_type=data["event_type"],
                metadata=data.get("metadata", {}),
                timestamp=timestamp,
                correlation_id=correlation_id,
            )
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid event data: {e}") from e
