"""Unit tests for onboarding providers."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from modules.onboarding import (
    HttpEnrollmentEvaluator,
    InMemoryStudentStore,
    LastDigitOutcomeEvaluator,
)
from modules.onboarding import providers

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clear_provider_caches():
    providers.get_outcome_evaluator.cache_clear()
    providers.get_student_store.cache_clear()
    yield
    providers.get_outcome_evaluator.cache_clear()
    providers.get_student_store.cache_clear()


def _settings(evaluator):
    return SimpleNamespace(
        onboarding=SimpleNamespace(
            evaluator=evaluator,
            enrollment_url="http://enroll.test/enroll",
            enrollment_timeout_seconds=3.0,
            store_backend="memory",
            students_table_name="test-students",
        )
    )


class TestGetOutcomeEvaluator:
    @patch("modules.onboarding.providers.get_settings")
    def test_last_digit(self, mock_get_settings):
        mock_get_settings.return_value = _settings("last_digit")

        assert isinstance(providers.get_outcome_evaluator(), LastDigitOutcomeEvaluator)

    @patch("modules.onboarding.providers.get_settings")
    def test_http(self, mock_get_settings):
        mock_get_settings.return_value = _settings("http")

        evaluator = providers.get_outcome_evaluator()

        assert isinstance(evaluator, HttpEnrollmentEvaluator)
        assert evaluator.url == "http://enroll.test/enroll"
        assert evaluator.timeout == 3.0

    @patch("modules.onboarding.providers.get_settings")
    def test_http_reads_student_store(self, mock_get_settings):
        mock_get_settings.return_value = _settings("http")

        evaluator = providers.get_outcome_evaluator()

        assert evaluator.student_store is providers.get_student_store()


class TestGetStudentStore:
    @patch("modules.onboarding.providers.get_settings")
    def test_memory_backend(self, mock_get_settings):
        mock_get_settings.return_value = _settings("last_digit")

        store = providers.get_student_store()

        assert isinstance(store, InMemoryStudentStore)
        assert providers.get_student_store() is store
