"""Operation status enumeration.

Status codes for operation results, used to classify outcomes of operations
across the application for appropriate error handling and retries.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (connection reset, 5xx, i/o timeout)
        PERMANENT_ERROR: Non-retryable error (validation, rejected request)
        UNAUTHORIZED: Provider rejected the credentials
        NOT_FOUND: Resource not found
        TIMEOUT: The caller's deadline expired before the operation finished
        CANCELLED: The caller cancelled the operation
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
