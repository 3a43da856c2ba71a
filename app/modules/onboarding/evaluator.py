"""Outcome evaluators for student enrollment.

``LastDigitOutcomeEvaluator`` simulates the enrollment API from the last
character of the entity key; ``HttpEnrollmentEvaluator`` calls a real
enrollment endpoint.
"""

from typing import Any, Dict, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry import EvaluatorUnavailableError, OutcomeCode
from modules.onboarding.store import StudentStore

logger = get_module_logger()

LAST_DIGIT_OUTCOMES = {
    "0": OutcomeCode.SUCCESS,
    "1": OutcomeCode.CONFLICT,
    "2": OutcomeCode.SERVER_ERROR,
}


class LastDigitOutcomeEvaluator:
    """Deterministic stand-in for the enrollment API.

    '0' -> SUCCESS, '1' -> CONFLICT, '2' -> SERVER_ERROR, anything else
    (including an empty key) -> INVALID_INPUT.
    """

    def evaluate(self, key: str) -> OutcomeCode:
        if not key:
            return OutcomeCode.INVALID_INPUT
        return LAST_DIGIT_OUTCOMES.get(key[-1], OutcomeCode.INVALID_INPUT)


class HttpEnrollmentEvaluator:
    """Evaluates enrollment by POSTing the student to an enrollment endpoint.

    The request body is the saved student (camelCase, as accepted by
    ``POST /students``). When no student is stored under the key, or no
    student store is configured, only ``{"entityKey": key}`` is sent.

    Status mapping: 200 -> SUCCESS, 409 -> CONFLICT, 5xx -> SERVER_ERROR,
    anything else -> INVALID_INPUT.

    Args:
        url: Enrollment endpoint
        timeout: Request timeout in seconds
        session: Optional requests session (shared connection pool)
        student_store: Optional StudentStore supplying the request body
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        session=None,
        student_store: Optional[StudentStore] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.student_store = student_store

    def evaluate(self, key: str) -> OutcomeCode:
        """Call the enrollment endpoint for ``key``.

        Raises:
            EvaluatorUnavailableError: On timeout or connection failure
        """
        body = self._request_body(key)
        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            logger.warning(
                "enrollment_request_unavailable",
                url=self.url,
                entity_key=key,
                error=str(e),
            )
            raise EvaluatorUnavailableError(
                f"Enrollment endpoint unavailable: {e}"
            ) from e

        outcome = self._map_status(response.status_code)
        logger.debug(
            "enrollment_request_completed",
            entity_key=key,
            status_code=response.status_code,
            outcome=outcome.name,
        )
        return outcome

    def _request_body(self, key: str) -> Dict[str, Any]:
        student = self.student_store.get(key) if self.student_store else None
        if student is None:
            return {"entityKey": key}
        return student.to_payload()

    @staticmethod
    def _map_status(status_code: int) -> OutcomeCode:
        if status_code == 200:
            return OutcomeCode.SUCCESS
        if status_code == 409:
            return OutcomeCode.CONFLICT
        if 500 <= status_code < 600:
            return OutcomeCode.SERVER_ERROR
        return OutcomeCode.INVALID_INPUT
