"""Fixtures for onboarding module tests."""

from datetime import date

import pytest

from modules.onboarding import OnboardingIntake, StudentOnboarding


@pytest.fixture
def student_factory():
    """Factory for StudentOnboarding payloads."""

    def _factory(entity_key: str = "099999999900", **kwargs) -> StudentOnboarding:
        kwargs.setdefault("roll_no", "R-1024")
        kwargs.setdefault("name", "Asha")
        kwargs.setdefault("student_class", "10")
        kwargs.setdefault("dob", date(2010, 4, 12))
        return StudentOnboarding(entity_key=entity_key, **kwargs)

    return _factory


@pytest.fixture
def intake_factory(record_store, clock):
    """Factory for OnboardingIntake sharing the test store and clock."""

    def _factory(evaluator, **kwargs) -> OnboardingIntake:
        kwargs.setdefault("record_store", record_store)
        kwargs.setdefault("initial_delay_seconds", 60)
        return OnboardingIntake(evaluator=evaluator, clock=clock, **kwargs)

    return _factory
