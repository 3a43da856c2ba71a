"""Event dispatcher for the in-process event bus.

Handlers are registered per event type and called when events are
dispatched, either synchronously or on a managed background executor.
Handler failures are logged and never reach the publisher.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from infrastructure.events.models import Event
from infrastructure.logging import get_module_logger

logger = get_module_logger()

# Event handler registry: event_type -> list of handlers
EVENT_HANDLERS: Dict[str, List[Callable[[Event], Any]]] = {}

# Managed executor for background dispatches
_EXECUTOR: Optional[ThreadPoolExecutor] = None
_executor_lock = Lock()


def register_event_handler(event_type: str):
    """Decorator registering a handler for ``event_type``.

    Registering the same function twice for one event type is a no-op.

    Args:
        event_type: The type of event to handle (e.g., 'student.onboarding').
    """

    def decorator(handler_func: Callable[[Event], Any]) -> Callable[[Event], Any]:
        handlers = EVENT_HANDLERS.setdefault(event_type, [])
        if handler_func not in handlers:
            handlers.append(handler_func)
        logger.debug(
            "registered_event_handler",
            handler=getattr(handler_func, "__name__", "unknown"),
            event_type=event_type,
            total_handlers=len(handlers),
        )
        return handler_func

    return decorator


def dispatch_event(event: Event) -> List[Any]:
    """Dispatch an event synchronously to all registered handlers.

    If a handler raises, the error is logged and the remaining handlers
    still run.

    Returns:
        List of return values from the handlers that completed.
    """
    results = []
    handlers = list(EVENT_HANDLERS.get(event.event_type, []))

    logger.info(
        "dispatching_event",
        event_type=event.event_type,
        handler_count=len(handlers),
        correlation_id=str(event.correlation_id),
    )

    for handler in handlers:
        try:
            results.append(handler(event))
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "event_handler_failed",
                handler=getattr(handler, "__name__", "unknown"),
                event_type=event.event_type,
                error=str(e),
                correlation_id=str(event.correlation_id),
            )

    return results


def start_event_executor(max_workers: int = 4) -> None:
    """Start the background executor (idempotent).

    Args:
        max_workers: Maximum number of concurrently running handlers.
    """
    global _EXECUTOR
    with _executor_lock:
        if _EXECUTOR is None:
            _EXECUTOR = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="event-dispatch"
            )
            logger.info("event_executor_started", max_workers=max_workers)


def shutdown_event_executor(wait: bool = True) -> None:
    """Shut down the background executor (idempotent).

    Args:
        wait: If True, wait for pending dispatches to complete.
    """
    global _EXECUTOR
    with _executor_lock:
        if _EXECUTOR is None:
            return
        try:
            _EXECUTOR.shutdown(wait=wait)
            logger.info("event_executor_shut_down", wait=wait)
        finally:
            _EXECUTOR = None


def dispatch_background(event: Event) -> Optional[Future]:
    """Dispatch an event on the background executor (fire-and-forget).

    Returns:
        The Future of the dispatch, or None when the executor is not running
        (the event is dropped and an error is logged).
    """
    with _executor_lock:
        executor = _EXECUTOR
        if executor is None:
            logger.error(
                "event_executor_unavailable",
                event_type=event.event_type,
                correlation_id=str(event.correlation_id),
            )
            return None
        return executor.submit(dispatch_event, event)


def get_handlers_for_event(event_type: str) -> List[Callable[[Event], Any]]:
    """Get all handlers registered for ``event_type``."""
    return list(EVENT_HANDLERS.get(event_type, []))


def clear_handlers() -> None:
    """Clear all registered handlers.

    WARNING: This is intended for testing only.
    """
    EVENT_HANDLERS.clear()
    logger.debug("cleared_all_event_handlers")
