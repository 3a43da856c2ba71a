"""Unit tests for OperationResult."""

import pytest

from infrastructure.operations import OperationResult, OperationStatus

pytestmark = pytest.mark.unit


class TestOperationResult:
    def test_success(self):
        result = OperationResult.success(data={"Item": {}})

        assert result.is_success
        assert result.data == {"Item": {}}
        assert result.error_code is None

    def test_transient_error(self):
        result = OperationResult.transient_error("timeout", error_code="TIMEOUT")

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert not result.is_success
        assert not result.is_conflict

    def test_permanent_error(self):
        result = OperationResult.permanent_error("denied")
        assert result.status == OperationStatus.PERMANENT_ERROR

    def test_conflict(self):
        result = OperationResult.error(OperationStatus.CONFLICT, "exists")
        assert result.is_conflict
