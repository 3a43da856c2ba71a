"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.onboarding import OnboardingSettings

__all__ = [
    "OnboardingSettings",
]
