"""Fixed back-off retries for transient failures.

Usage:
    from infrastructure.resilience.retry import RetryConfig, execute_with_retry

    config = RetryConfig(retry_attempts=2, delay_ms=500)
    result = execute_with_retry(lambda attempt: transport.send(...), config, ctx)
"""

from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.executor import execute_with_retry

__all__ = ["RetryConfig", "execute_with_retry"]
