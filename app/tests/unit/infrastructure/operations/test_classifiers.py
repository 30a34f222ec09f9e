"""Unit tests for infrastructure.operations.classifiers."""

import smtplib
from unittest.mock import MagicMock

import pytest
import requests

from infrastructure.operations.classifiers import (
    DEFAULT_RETRY_AFTER,
    classify_http_status,
    classify_network_error,
    classify_requests_error,
    classify_smtp_error,
)
from infrastructure.operations.status import OperationStatus


@pytest.mark.unit
class TestClassifyHttpStatus:
    def test_2xx_is_success(self):
        result = classify_http_status(200, "ok", provider="webhook")
        assert result.is_success
        assert result.message == "webhook 200: ok"

    def test_429_is_transient_with_retry_after(self):
        result = classify_http_status(429, "", {"Retry-After": "7"})
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "RATE_LIMITED"
        assert result.retry_after == 7

    def test_429_without_header_uses_default_retry_after(self):
        result = classify_http_status(429)
        assert result.retry_after == DEFAULT_RETRY_AFTER

    def test_429_with_unparseable_header_uses_default(self):
        result = classify_http_status(429, headers={"retry-after": "soon"})
        assert result.retry_after == DEFAULT_RETRY_AFTER

    def test_401_is_unauthorized(self):
        result = classify_http_status(401)
        assert result.status == OperationStatus.UNAUTHORIZED

    def test_403_is_permanent_and_includes_body(self):
        result = classify_http_status(403, "invalid_token\n", provider="webhook")
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "FORBIDDEN"
        assert result.message == "webhook 403: invalid_token"

    def test_404_is_not_found(self):
        result = classify_http_status(404, "no_service")
        assert result.status == OperationStatus.NOT_FOUND

    def test_5xx_is_transient(self):
        result = classify_http_status(503)
        assert result.is_transient
        assert result.error_code == "SERVER_ERROR"

    def test_other_4xx_is_permanent(self):
        result = classify_http_status(400, "bad")
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "HTTP_ERROR"


@pytest.mark.unit
class TestClassifyRequestsError:
    def test_timeout_is_transient(self):
        result = classify_requests_error(requests.exceptions.ReadTimeout("slow"))
        assert result.is_transient
        assert result.error_code == "IO_TIMEOUT"

    def test_connection_error_is_transient(self):
        result = classify_requests_error(requests.exceptions.ConnectionError("reset"))
        assert result.is_transient
        assert result.error_code == "CONNECTION_ERROR"

    def test_http_error_delegates_to_status(self):
        response = MagicMock()
        response.status_code = 401
        response.text = "Authenticate"
        response.headers = {}
        exc = requests.exceptions.HTTPError(response=response)

        result = classify_requests_error(exc, provider="twilio")

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.message == "twilio 401: Authenticate"

    def test_unknown_error_is_permanent(self):
        result = classify_requests_error(ValueError("boom"))
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "UNKNOWN_ERROR"


@pytest.mark.unit
class TestClassifySmtpError:
    def test_authentication_error_is_unauthorized(self):
        exc = smtplib.SMTPAuthenticationError(535, b"bad credentials")
        assert classify_smtp_error(exc).status == OperationStatus.UNAUTHORIZED

    def test_recipients_refused_is_permanent(self):
        exc = smtplib.SMTPRecipientsRefused({"a@example.com": (550, b"no")})
        result = classify_smtp_error(exc)
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert "a@example.com" in result.message

    def test_server_disconnected_is_transient(self):
        result = classify_smtp_error(smtplib.SMTPServerDisconnected("gone"))
        assert result.is_transient

    def test_4xx_reply_is_transient(self):
        exc = smtplib.SMTPDataError(451, b"try again later")
        result = classify_smtp_error(exc)
        assert result.is_transient
        assert result.message == "smtp 451: try again later"

    def test_5xx_reply_is_permanent(self):
        exc = smtplib.SMTPSenderRefused(553, b"not allowed", "from@example.com")
        result = classify_smtp_error(exc)
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "SMTP_REJECTED"

    def test_timeout_is_transient(self):
        result = classify_smtp_error(TimeoutError("timed out"))
        assert result.error_code == "IO_TIMEOUT"

    def test_connection_refused_is_transient(self):
        result = classify_smtp_error(ConnectionRefusedError("refused"))
        assert result.is_transient
        assert result.error_code == "CONNECTION_ERROR"


@pytest.mark.unit
class TestClassifyNetworkError:
    def test_timeout(self):
        assert classify_network_error(TimeoutError()).error_code == "IO_TIMEOUT"

    def test_os_error(self):
        assert classify_network_error(OSError("down")).is_transient

    def test_other(self):
        result = classify_network_error(RuntimeError("x"), provider="webhook")
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.message.startswith("webhook error")
