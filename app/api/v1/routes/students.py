from fastapi import APIRouter, HTTPException, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from modules.onboarding import StudentOnboarding, onboard_student
from modules.onboarding.dependencies import StudentStoreDep
from modules.onboarding.schemas import StudentOnboardingAccepted

logger = get_module_logger()

router = APIRouter(tags=["Students"])
limiter = get_limiter()


@router.post(
    "/students",
    status_code=202,
    response_model=StudentOnboardingAccepted,
    response_model_by_alias=True,
)
@limiter.limit("30/minute")
def create_student(
    request: Request,  # pylint: disable=unused-argument
    student: StudentOnboarding,
    student_store: StudentStoreDep,
):
    """Save a student and start onboarding.

    The onboarding event is processed in the background; the retry record
    appears once the intake path has evaluated it.
    """
    event = onboard_student(student, student_store)
    return StudentOnboardingAccepted(
        entity_key=student.entity_key,
        correlation_id=str(event.correlation_id),
    )


@router.get(
    "/students/{entity_key}",
    response_model=StudentOnboarding,
    response_model_by_alias=True,
)
@limiter.limit("50/minute")
def get_student(
    request: Request,  # pylint: disable=unused-argument
    entity_key: str,
    student_store: StudentStoreDep,
):
    student = student_store.get(entity_key)
    if student is None:
        logger.info("student_not_found", entity_key=entity_key)
        raise HTTPException(status_code=404, detail="Student not found")
    return student
