"""Schemas for student onboarding.

Wire format is camelCase (``entityKey``, ``rollNo``, ``studentClass``);
Python attributes are snake_case.
"""

from datetime import date
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_SCHOOL = "ABC Public School"


class StudentOnboarding(BaseModel):
    """Student onboarding request, also the payload of the onboarding event."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )

    entity_key: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            description="Student entity key; its last digit drives the mocked outcome",
            json_schema_extra={"example": "099999999900"},
        ),
    ]
    roll_no: Annotated[
        str,
        Field(..., min_length=1, json_schema_extra={"example": "R-1024"}),
    ]
    name: Annotated[
        str,
        Field(..., min_length=1, max_length=200, json_schema_extra={"example": "Asha"}),
    ]
    student_class: Annotated[
        str,
        Field(..., min_length=1, json_schema_extra={"example": "10"}),
    ]
    school: Annotated[
        str,
        Field(default=DEFAULT_SCHOOL, json_schema_extra={"example": DEFAULT_SCHOOL}),
    ] = DEFAULT_SCHOOL
    dob: Annotated[
        date,
        Field(..., json_schema_extra={"example": "2010-04-12"}),
    ]

    def to_payload(self) -> Dict[str, Any]:
        """camelCase JSON-safe payload, stored as the record's request payload."""
        return self.model_dump(mode="json", by_alias=True)


class StudentOnboardingAccepted(BaseModel):
    """Response for an accepted onboarding request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    entity_key: str
    correlation_id: str
    status: str = "accepted"
