"""Fixtures for infrastructure event system tests."""

from unittest.mock import MagicMock

import pytest

from infrastructure.events.models import Event


@pytest.fixture
def event_factory():
    """Factory for creating test events."""

    def _factory(event_type: str = "test.event", metadata: dict = None):
        return Event(event_type=event_type, metadata=metadata or {})

    return _factory


@pytest.fixture
def mock_event_handler():
    """Mock event handler function."""
    handler = MagicMock()
    handler.__name__ = "mock_event_handler"
    return handler
