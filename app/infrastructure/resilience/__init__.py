"""Resilience patterns and implementations.

This module contains retry logic applied to transient transport failures.
"""

from infrastructure.resilience.retry import RetryConfig, execute_with_retry

__all__ = ["RetryConfig", "execute_with_retry"]
