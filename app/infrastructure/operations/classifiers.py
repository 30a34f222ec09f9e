"""Error classifiers for transport exceptions.

Converts library-specific exceptions (smtplib, requests) and raw HTTP
statuses returned by webhook providers into standardized OperationResult
objects. Centralizes the transient/permanent decision so every transport
classifies failures the same way.

Key Functions:
- classify_http_status(): HTTP status + body → OperationResult
- classify_requests_error(): requests exceptions → OperationResult
- classify_smtp_error(): smtplib / socket exceptions → OperationResult
- classify_network_error(): socket and urllib exceptions → OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_requests_error

    try:
        response = requests.post(url, data=payload, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_requests_error(exc)
"""

import smtplib
from typing import Any, Mapping, Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

DEFAULT_RETRY_AFTER = 60


def _retry_after(headers: Optional[Mapping[str, Any]]) -> int:
    if not headers:
        return DEFAULT_RETRY_AFTER
    value = headers.get("Retry-After") or headers.get("retry-after")
    try:
        return int(value) if value is not None else DEFAULT_RETRY_AFTER
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER


def classify_http_status(
    status_code: int,
    body: str = "",
    headers: Optional[Mapping[str, Any]] = None,
    provider: str = "http",
) -> OperationResult:
    """Classify an HTTP response status into OperationResult.

    Status Code Mapping:
    - 2xx: SUCCESS
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401: Unauthorized → UNAUTHORIZED
    - 403: Forbidden → PERMANENT_ERROR
    - 404: Not found → NOT_FOUND
    - 5xx: Server error → TRANSIENT_ERROR
    - Other: PERMANENT_ERROR

    Args:
        status_code: HTTP status returned by the provider
        body: Response body, included in the message for operators
        headers: Response headers, used for Retry-After
        provider: Short provider label used as the message prefix

    Returns:
        OperationResult whose message reads like ``"webhook 403: invalid_token"``
    """
    detail = f"{provider} {status_code}"
    if body:
        detail = f"{detail}: {body.strip()[:500]}"

    if 200 <= status_code < 300:
        return OperationResult.success(message=detail)

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            detail,
            error_code="RATE_LIMITED",
            retry_after=_retry_after(headers),
        )

    if status_code == 401:
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, detail, error_code="UNAUTHORIZED"
        )

    if status_code == 403:
        return OperationResult.permanent_error(detail, error_code="FORBIDDEN")

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND, detail, error_code="NOT_FOUND"
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(detail, error_code="SERVER_ERROR")

    return OperationResult.permanent_error(detail, error_code="HTTP_ERROR")


def classify_requests_error(exc: Exception, provider: str = "http") -> OperationResult:
    """Classify exceptions raised by the requests library.

    - Timeout: TRANSIENT_ERROR (IO_TIMEOUT)
    - ConnectionError: TRANSIENT_ERROR (CONNECTION_ERROR)
    - HTTPError with a response: delegated to classify_http_status
    - Anything else: PERMANENT_ERROR

    Args:
        exc: Exception raised by requests
        provider: Short provider label used as the message prefix

    Returns:
        OperationResult with appropriate status and error_code
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return OperationResult.transient_error(
            f"{provider} i/o timeout: {exc}", error_code="IO_TIMEOUT"
        )

    if isinstance(exc, requests.exceptions.ConnectionError):
        return OperationResult.transient_error(
            f"{provider} connection error: {exc}", error_code="CONNECTION_ERROR"
        )

    if isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
        response = exc.response
        return classify_http_status(
            response.status_code, response.text, response.headers, provider
        )

    return OperationResult.permanent_error(
        f"{provider} error: {type(exc).__name__}: {exc}", error_code="UNKNOWN_ERROR"
    )


def classify_smtp_error(exc: Exception) -> OperationResult:
    """Classify smtplib and socket exceptions into OperationResult.

    SMTP reply codes in the 4xx range are transient by definition of the
    protocol; 5xx replies are permanent.

    Args:
        exc: Exception raised while talking to the SMTP server

    Returns:
        OperationResult with appropriate status and error_code
    """
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"smtp authentication failed ({exc.smtp_code})",
            error_code="UNAUTHORIZED",
        )

    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        refused = ", ".join(sorted(exc.recipients))
        return OperationResult.permanent_error(
            f"smtp recipients refused: {refused}", error_code="RECIPIENTS_REFUSED"
        )

    if isinstance(exc, smtplib.SMTPServerDisconnected):
        return OperationResult.transient_error(
            f"smtp server disconnected: {exc}", error_code="CONNECTION_ERROR"
        )

    if isinstance(exc, smtplib.SMTPResponseException):
        error = exc.smtp_error
        if isinstance(error, bytes):
            error = error.decode("utf-8", errors="replace")
        detail = f"smtp {exc.smtp_code}: {error}"
        if 400 <= exc.smtp_code < 500:
            return OperationResult.transient_error(detail, error_code="SMTP_TRANSIENT")
        return OperationResult.permanent_error(detail, error_code="SMTP_REJECTED")

    if isinstance(exc, smtplib.SMTPException):
        return OperationResult.permanent_error(
            f"smtp error: {exc}", error_code="SMTP_ERROR"
        )

    if isinstance(exc, TimeoutError):
        return OperationResult.transient_error(
            f"smtp i/o timeout: {exc}", error_code="IO_TIMEOUT"
        )

    if isinstance(exc, OSError):
        return OperationResult.transient_error(
            f"smtp connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    return OperationResult.permanent_error(
        f"smtp error: {type(exc).__name__}: {exc}", error_code="UNKNOWN_ERROR"
    )


def classify_network_error(exc: Exception, provider: str = "http") -> OperationResult:
    """Classify socket-level failures raised outside the requests library.

    - TimeoutError: TRANSIENT_ERROR (IO_TIMEOUT)
    - OSError (includes urllib URLError): TRANSIENT_ERROR (CONNECTION_ERROR)
    - Anything else: PERMANENT_ERROR
    """
    if isinstance(exc, TimeoutError):
        return OperationResult.transient_error(
            f"{provider} i/o timeout: {exc}", error_code="IO_TIMEOUT"
        )

    if isinstance(exc, OSError):
        return OperationResult.transient_error(
            f"{provider} connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    return OperationResult.permanent_error(
        f"{provider} error: {type(exc).__name__}: {exc}", error_code="UNKNOWN_ERROR"
    )
