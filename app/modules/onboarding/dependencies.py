"""FastAPI dependency aliases for the onboarding routes."""

from typing import Annotated

from fastapi import Depends

from modules.onboarding.providers import get_student_store
from modules.onboarding.store import StudentStore

StudentStoreDep = Annotated[StudentStore, Depends(get_student_store)]
