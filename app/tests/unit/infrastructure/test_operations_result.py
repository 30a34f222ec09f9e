"""Unit tests for OperationResult and OperationStatus in infrastructure."""

import pytest
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


@pytest.mark.unit
class TestOperationStatus:
    def test_operation_status_success(self):
        assert OperationStatus.SUCCESS.value == "success"

    def test_operation_status_transient_error(self):
        assert OperationStatus.TRANSIENT_ERROR.value == "transient_error"

    def test_operation_status_permanent_error(self):
        assert OperationStatus.PERMANENT_ERROR.value == "permanent_error"

    def test_operation_status_timeout(self):
        assert OperationStatus.TIMEOUT.value == "timeout"

    def test_operation_status_cancelled(self):
        assert OperationStatus.CANCELLED.value == "cancelled"


@pytest.mark.unit
class TestOperationResultFactories:
    def test_success_factory_minimal(self):
        result = OperationResult.success()
        assert result.status == OperationStatus.SUCCESS
        assert result.is_success
        assert not result.is_transient

    def test_success_factory_with_data(self):
        data = {"message_ids": ["SM123"]}
        result = OperationResult.success(data=data, message="Sent")
        assert result.data == data
        assert result.message == "Sent"

    def test_error_factory_with_error_code(self):
        result = OperationResult.error(
            OperationStatus.NOT_FOUND, "webhook 404", error_code="NOT_FOUND"
        )
        assert result.status == OperationStatus.NOT_FOUND
        assert result.error_code == "NOT_FOUND"
        assert not result.is_success

    def test_transient_error_factory(self):
        result = OperationResult.transient_error("Timeout", error_code="IO_TIMEOUT")
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.is_transient

    def test_permanent_error_factory_carries_data(self):
        result = OperationResult.permanent_error(
            "smtp_port: out of range",
            error_code="INVALID_CONFIG",
            data={"field": "smtp_port"},
        )
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.data == {"field": "smtp_port"}
        assert not result.is_transient

    def test_timeout_factory(self):
        result = OperationResult.timeout()
        assert result.status == OperationStatus.TIMEOUT
        assert result.error_code == "TIMEOUT"

    def test_cancelled_factory(self):
        result = OperationResult.cancelled("stopped")
        assert result.status == OperationStatus.CANCELLED
        assert result.message == "stopped"
        assert result.error_code == "CANCELLED"
