"""In-process event bus.

A lightweight dispatcher carrying messages (such as student onboarding
events) from publishers to registered handlers.

Usage:

    from infrastructure.events import Event, register_event_handler, dispatch_background

    @register_event_handler("student.onboarding")
    def handle_student_onboarding(event: Event) -> None:
        ...

    dispatch_background(
        Event(event_type="student.onboarding", metadata={"entityKey": "012345678900"})
    )
"""

from infrastructure.events.dispatcher import (
    clear_handlers,
    dispatch_background,
    dispatch_event,
    get_handlers_for_event,
    register_event_handler,
    shutdown_event_executor,
    start_event_executor,
)
from infrastructure.events.models import Event

__all__ = [
    "Event",
    "dispatch_event",
    "dispatch_background",
    "register_event_handler",
    "get_handlers_for_event",
    "clear_handlers",
    "start_event_executor",
    "shutdown_event_executor",
]
