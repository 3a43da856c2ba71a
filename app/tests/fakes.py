"""Test doubles shared across the test suite."""

from datetime import datetime, timedelta, timezone

from infrastructure.resilience.retry import OutcomeCode

BASE_TIME = datetime(2025, 6, 12, 7, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class StubEvaluator:
    """OutcomeEvaluator returning a fixed outcome and recording every key.

    Setting ``outcome`` to an exception instance makes ``evaluate`` raise it.
    """

    def __init__(self, outcome=OutcomeCode.SUCCESS):
        self.outcome = outcome
        self.calls = []

    def evaluate(self, key):
        self.calls.append(key)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome
