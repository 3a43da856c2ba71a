"""Infrastructure configuration module - public API.

Centralized configuration built on Pydantic BaseSettings with domain-based
organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    RetrySettings: Retry engine settings class
    OnboardingSettings: Onboarding feature settings class
    AwsSettings: AWS integration settings class

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    backend = settings.retry.backend
    task_type = settings.onboarding.task_type
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.infrastructure.retry import RetrySettings
from infrastructure.configuration.features.onboarding import OnboardingSettings
from infrastructure.configuration.integrations.aws import AwsSettings

__all__ = [
    "Settings",
    "settings",
    "RetrySettings",
    "OnboardingSettings",
    "AwsSettings",
]
