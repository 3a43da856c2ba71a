"""Application-scoped providers for the onboarding workflow."""

from functools import lru_cache

from infrastructure.resilience.retry import OutcomeEvaluator, RetryScheduler
from infrastructure.services.providers import (
    get_retry_policy_store,
    get_retry_record_store,
    get_settings,
)
from modules.onboarding.evaluator import (
    HttpEnrollmentEvaluator,
    LastDigitOutcomeEvaluator,
)
from modules.onboarding.intake import OnboardingIntake
from modules.onboarding.store import StudentStore, create_student_store


@lru_cache
def get_student_store() -> StudentStore:
    return create_student_store(get_settings())


@lru_cache
def get_outcome_evaluator() -> OutcomeEvaluator:
    """Evaluator selected by ``ONBOARDING_EVALUATOR``."""
    onboarding = get_settings().onboarding
    if onboarding.evaluator == "http":
        return HttpEnrollmentEvaluator(
            url=onboarding.enrollment_url,
            timeout=onboarding.enrollment_timeout_seconds,
            student_store=get_student_store(),
        )
    return LastDigitOutcomeEvaluator()


@lru_cache
def get_onboarding_intake() -> OnboardingIntake:
    onboarding = get_settings().onboarding
    return OnboardingIntake(
        record_store=get_retry_record_store(),
        evaluator=get_outcome_evaluator(),
        task_type=onboarding.task_type,
        initial_delay_seconds=onboarding.initial_delay_seconds,
    )


@lru_cache
def get_retry_scheduler() -> RetryScheduler:
    """Scheduler sharing the record store and evaluator with the intake path."""
    return RetryScheduler(
        record_store=get_retry_record_store(),
        policy_store=get_retry_policy_store(),
        evaluator=get_outcome_evaluator(),
    )
