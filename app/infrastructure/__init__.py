"""Infrastructure modules for the channel dispatch service.

Centralized infrastructure components:
- configuration: Settings management (Settings, MessagingFeatureSettings)
- logging: Structured logging setup and request context binding
- operations: Operation results, error classification and cancellation context
- resilience: Retry logic for transient failures
- services: Dependency injection providers (get_settings)
"""

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus
from infrastructure.services import get_settings

__all__ = [
    "OperationResult",
    "OperationStatus",
    "get_settings",
]
