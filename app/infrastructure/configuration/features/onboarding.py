"""Student onboarding feature settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class OnboardingSettings(FeatureSettings):
    """Configuration for the student onboarding intake.

    Environment Variables:
        ONBOARDING_TASK_TYPE: Task type recorded on onboarding retry records
            (default: CBSE_ONBOARDING)
        ONBOARDING_INITIAL_DELAY_SECONDS: Delay before a freshly created record
            becomes eligible for the retry scheduler (default: 60s)
        ONBOARDING_EVALUATOR: Outcome evaluator - 'last_digit' (simulated) or
            'http' (enrollment API call) (default: last_digit)
        ONBOARDING_ENROLLMENT_URL: Enrollment endpoint used by the 'http' evaluator
        ONBOARDING_ENROLLMENT_TIMEOUT_SECONDS: Request timeout for the
            enrollment endpoint (default: 10s)
        ONBOARDING_STORE_BACKEND: Student storage - 'memory' or 'dynamodb'
            (default: memory)
        ONBOARDING_STUDENTS_TABLE_NAME: DynamoDB table holding students
    """

    task_type: str = Field(default="CBSE_ONBOARDING", alias="ONBOARDING_TASK_TYPE")
    initial_delay_seconds: int = Field(
        default=60, alias="ONBOARDING_INITIAL_DELAY_SECONDS"
    )
    evaluator: str = Field(default="last_digit", alias="ONBOARDING_EVALUATOR")
    enrollment_url: str = Field(
        default="http://localhost:8081/enroll", alias="ONBOARDING_ENROLLMENT_URL"
    )
    enrollment_timeout_seconds: float = Field(
        default=10.0, alias="ONBOARDING_ENROLLMENT_TIMEOUT_SECONDS"
    )
    store_backend: str = Field(default="memory", alias="ONBOARDING_STORE_BACKEND")
    students_table_name: str = Field(
        default="onboarding-students", alias="ONBOARDING_STUDENTS_TABLE_NAME"
    )

    @field_validator("evaluator")
    @classmethod
    def _validate_evaluator(cls, v: str) -> str:
        if v not in ("last_digit", "http"):
            raise ValueError(
                f"Unknown ONBOARDING_EVALUATOR: {v}. Supported: last_digit, http"
            )
        return v

    @field_validator("store_backend")
    @classmethod
    def _validate_store_backend(cls, v: str) -> str:
        if v not in ("memory", "dynamodb"):
            raise ValueError(
                f"Unknown ONBOARDING_STORE_BACKEND: {v}. Supported: memory, dynamodb"
            )
        return v

    @field_validator("initial_delay_seconds")
    @classmethod
    def _validate_initial_delay(cls, v: int) -> int:
        if v < 0:
            raise ValueError("ONBOARDING_INITIAL_DELAY_SECONDS must be >= 0")
        return v
