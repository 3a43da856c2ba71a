"""Student onboarding module.

Publishes student onboarding events, evaluates each student against the
enrollment API on first delivery and hands unresolved students to the retry
engine.
"""

from modules.onboarding.evaluator import (
    HttpEnrollmentEvaluator,
    LastDigitOutcomeEvaluator,
)
from modules.onboarding.handlers import (
    STUDENT_ONBOARDING_EVENT,
    handle_student_onboarding,
    register_handlers,
)
from modules.onboarding.intake import OnboardingIntake
from modules.onboarding.schemas import StudentOnboarding
from modules.onboarding.service import onboard_student, publish_student_onboarding
from modules.onboarding.store import (
    DynamoDBStudentStore,
    InMemoryStudentStore,
    StudentStore,
    StudentStoreError,
)

__all__ = [
    "STUDENT_ONBOARDING_EVENT",
    "DynamoDBStudentStore",
    "HttpEnrollmentEvaluator",
    "InMemoryStudentStore",
    "LastDigitOutcomeEvaluator",
    "OnboardingIntake",
    "StudentOnboarding",
    "StudentStore",
    "StudentStoreError",
    "handle_student_onboarding",
    "onboard_student",
    "publish_student_onboarding",
    "register_handlers",
]
