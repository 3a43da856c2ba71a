"""Retry state machine.

A single transition table is applied both when a record is created and on
every scheduler evaluation:

    SUCCESS        -> CLOSED
    CONFLICT       -> FAILED
    SERVER_ERROR   -> FAILED if attempt_count + 1 >= max_attempts else PENDING
    INVALID_INPUT  -> FAILED (so is anything unrecognized)
"""

from typing import Any, Optional

from infrastructure.resilience.retry.models import OutcomeCode, RetryState


def next_state(
    outcome: Any,
    attempt_count: int,
    max_attempts: Optional[int] = None,
) -> RetryState:
    """Compute the state that follows an evaluation.

    Args:
        outcome: Outcome returned by the evaluator; unrecognized values fail closed
        attempt_count: Attempts recorded before this evaluation
        max_attempts: Attempt budget; None applies no budget (initial intake)

    Returns:
        The new RetryState
    """
    outcome = OutcomeCode.coerce(outcome)

    if outcome is OutcomeCode.SUCCESS:
        return RetryState.CLOSED
    if outcome is OutcomeCode.SERVER_ERROR:
        if max_attempts is not None and attempt_count + 1 >= max_attempts:
            return RetryState.FAILED
        return RetryState.PENDING
    return RetryState.FAILED
