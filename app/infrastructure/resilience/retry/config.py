"""Retry policy configuration.

This module defines the fixed back-off policy applied to transient
transport failures.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryConfig:
    """Fixed back-off retry policy.

    Attributes:
        retry_attempts: Additional attempts after the first one (0 disables retries)
        delay_ms: Pause between attempts in milliseconds

    Example:
        config = RetryConfig(retry_attempts=3, delay_ms=1000)
        config.total_attempts  # 4
    """

    retry_attempts: int = 0
    delay_ms: int = 0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.retry_attempts < 0:
            raise ValueError("retry_attempts must be >= 0")
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

    @property
    def total_attempts(self) -> int:
        return self.retry_attempts + 1

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0
