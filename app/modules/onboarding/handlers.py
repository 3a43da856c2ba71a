"""Student onboarding event consumers."""

from pydantic import ValidationError

from infrastructure.events import Event, get_handlers_for_event, register_event_handler
from infrastructure.logging import bind_event_context, get_module_logger
from modules.onboarding.providers import get_onboarding_intake
from modules.onboarding.schemas import StudentOnboarding

logger = get_module_logger()

STUDENT_ONBOARDING_EVENT = "student.onboarding"


def handle_student_onboarding(event: Event) -> None:
    """Validate the event payload and pass it to the intake path.

    Malformed payloads are logged and dropped; redelivering them would not
    make them valid.
    """
    with bind_event_context(
        correlation_id=str(event.correlation_id), event_type=event.event_type
    ):
        try:
            student = StudentOnboarding.model_validate(event.metadata)
        except ValidationError as e:
            logger.warning(
                "invalid_onboarding_event",
                errors=e.errors(include_url=False),
            )
            return

        get_onboarding_intake().on_onboarding_event(student)


def register_handlers() -> None:
    """Register the onboarding handlers on the event bus (idempotent)."""
    if handle_student_onboarding in get_handlers_for_event(STUDENT_ONBOARDING_EVENT):
        return
    register_event_handler(STUDENT_ONBOARDING_EVENT)(handle_student_onboarding)
    logger.info("onboarding_handlers_registered", event_type=STUDENT_ONBOARDING_EVENT)
