"""Outcome evaluator interface.

The evaluator stands in for the external call being retried. Implementations
must be safe to call concurrently; they raise EvaluatorUnavailableError when
no outcome could be obtained.
"""

from typing import Protocol

from infrastructure.resilience.retry.models import OutcomeCode


class OutcomeEvaluator(Protocol):
    """Capability interface: attempt the work for ``key`` and report the outcome."""

    def evaluate(self, key: str) -> OutcomeCode:
        """Return the outcome of attempting the work identified by ``key``.

        Raises:
            EvaluatorUnavailableError: If no outcome could be obtained
        """
        ...
