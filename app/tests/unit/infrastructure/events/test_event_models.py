"""Unit tests for the Event model."""

from uuid import UUID

import pytest

from infrastructure.events import Event

pytestmark = pytest.mark.unit


class TestEvent:
    def test_defaults(self):
        event = Event(event_type="student.onboarding")

        assert event.metadata == {}
        assert isinstance(event.correlation_id, UUID)
        assert event.timestamp.tzinfo is not None

    def test_round_trip(self):
        event = Event(event_type="student.onboarding", metadata={"entityKey": "1"})

        restored = Event.from_dict(event.to_dict())

        assert restored == event

    def test_to_dict_serializes_uuid_and_timestamp(self):
        data = Event(event_type="x").to_dict()

        assert isinstance(data["correlation_id"], str)
        assert isinstance(data["timestamp"], str)

    def test_from_dict_missing_type_raises(self):
        with pytest.raises(ValueError):
            Event.from_dict({"metadata": {}})
