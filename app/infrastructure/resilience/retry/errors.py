"""Retry engine exceptions."""


class RetryError(Exception):
    """Base class for retry engine errors."""


class DuplicateRetryRecordError(RetryError):
    """A record already exists for the (entity_key, task_type) pair."""

    def __init__(self, entity_key: str, task_type: str):
        self.entity_key = entity_key
        self.task_type = task_type
        super().__init__(
            f"Retry record already exists for entity_key={entity_key}, task_type={task_type}"
        )


class RetryStoreError(RetryError):
    """The record or policy store could not complete an operation."""

    def __init__(self, message: str, error_code: str | None = None):
        self.error_code = error_code
        super().__init__(message)


class EvaluatorUnavailableError(RetryError):
    """The outcome evaluator could not produce an outcome (timeout, outage).

    Transient: the record is left untouched and reconsidered later.
    """
