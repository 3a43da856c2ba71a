"""Unit tests for event-scoped logging context."""

import pytest
import structlog

from infrastructure.logging import bind_event_context, get_correlation_id

pytestmark = pytest.mark.unit


class TestBindEventContext:
    def test_binds_and_resets_correlation_id(self):
        assert get_correlation_id() is None

        with bind_event_context(correlation_id="abc-123") as correlation_id:
            assert correlation_id == "abc-123"
            assert get_correlation_id() == "abc-123"

        assert get_correlation_id() is None

    def test_generates_correlation_id(self):
        with bind_event_context() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id

    def test_extra_context_skips_none_values(self):
        with bind_event_context(correlation_id="x", event_type="a", user=None):
            bound = structlog.contextvars.get_contextvars()

        assert bound["event_type"] == "a"
        assert "user" not in bound

    def test_context_reset_on_error(self):
        with pytest.raises(RuntimeError):
            with bind_event_context(correlation_id="boom"):
                raise RuntimeError("fail")

        assert get_correlation_id() is None
