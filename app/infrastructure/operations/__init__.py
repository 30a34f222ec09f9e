"""Operation result types and status enums.

This module contains standardized result types for operations across
the application: status enums, the result dataclass, error classifiers
for transport exceptions and the cancellation context passed to blocking
operations.
"""

from infrastructure.operations.classifiers import (
    classify_http_status,
    classify_network_error,
    classify_requests_error,
    classify_smtp_error,
)
from infrastructure.operations.context import OperationContext
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationContext",
    "OperationResult",
    "OperationStatus",
    "classify_http_status",
    "classify_network_error",
    "classify_requests_error",
    "classify_smtp_error",
]
