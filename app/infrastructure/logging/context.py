"""Event-scoped context binding for structured logging.

Binds a correlation ID (and any extra metadata) to structlog's context
variables so that every log line emitted while an event is handled can be
traced back to the delivery that caused it.

Usage:
    from infrastructure.logging import bind_event_context

    with bind_event_context(correlation_id=str(event.correlation_id)):
        logger.info("handling_event")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_event_context(
    correlation_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind event-scoped context to all logs within the block.

    Args:
        correlation_id: Identifier of the delivery. Generated when missing.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation ID bound for the duration of the block.
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    context = {"correlation_id": correlation_id}
    context.update({k: v for k, v in extra_context.items() if v is not None})

    tokens = structlog.contextvars.bind_contextvars(**context)
    try:
        yield correlation_id
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def get_correlation_id() -> Optional[str]:
    """Return the correlation ID bound to the current context, if any."""
    return structlog.contextvars.get_contextvars().get("correlation_id")
