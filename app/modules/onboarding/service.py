"""Publishing side of the onboarding workflow."""

from concurrent.futures import Future
from typing import Optional

from infrastructure.events import Event, dispatch_background
from infrastructure.logging import get_module_logger
from modules.onboarding.handlers import STUDENT_ONBOARDING_EVENT
from modules.onboarding.schemas import StudentOnboarding
from modules.onboarding.store import StudentStore

logger = get_module_logger()


def build_onboarding_event(student: StudentOnboarding) -> Event:
    return Event(event_type=STUDENT_ONBOARDING_EVENT, metadata=student.to_payload())


def publish_student_onboarding(student: StudentOnboarding) -> Event:
    """Publish an onboarding event for ``student`` in the background.

    Returns:
        The published event; its correlation_id ties together the intake logs.
    """
    event = build_onboarding_event(student)
    future: Optional[Future] = dispatch_background(event)
    logger.info(
        "student_onboarding_published",
        entity_key=student.entity_key,
        correlation_id=str(event.correlation_id),
        queued=future is not None,
    )
    return event


def onboard_student(student: StudentOnboarding, student_store: StudentStore) -> Event:
    """Save ``student``, then publish its onboarding event.

    Nothing is published when the save fails.
    """
    student_store.save(student)
    return publish_student_onboarding(student)
