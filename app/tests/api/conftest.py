"""Fixtures for API route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter, setup_rate_limiter
from api.router import api_router
from infrastructure.configuration import Settings
from infrastructure.services import (
    get_retry_policy_store,
    get_retry_record_store,
    get_settings,
)
from modules.onboarding import InMemoryStudentStore
from modules.onboarding.providers import get_student_store


@pytest.fixture(autouse=True)
def reset_rate_limits():
    get_limiter().reset()
    yield
    get_limiter().reset()


@pytest.fixture
def student_store():
    return InMemoryStudentStore()


@pytest.fixture
def app(record_store, policy_store, student_store):
    """Application with the API routes and in-memory stores."""
    app = FastAPI()
    setup_rate_limiter(app)
    app.include_router(api_router)
    app.dependency_overrides[get_retry_record_store] = lambda: record_store
    app.dependency_overrides[get_retry_policy_store] = lambda: policy_store
    app.dependency_overrides[get_student_store] = lambda: student_store
    app.dependency_overrides[get_settings] = lambda: Settings(GIT_SHA="abc123")
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
