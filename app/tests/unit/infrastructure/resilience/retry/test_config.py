"""Unit tests for RetryConfig."""

import pytest

from infrastructure.resilience.retry import RetryConfig


@pytest.mark.unit
class TestRetryConfig:
    def test_defaults_disable_retries(self):
        config = RetryConfig()
        assert config.total_attempts == 1
        assert config.delay_seconds == 0

    def test_total_attempts_includes_first_attempt(self):
        assert RetryConfig(retry_attempts=3, delay_ms=1000).total_attempts == 4

    def test_delay_seconds_converts_milliseconds(self):
        assert RetryConfig(delay_ms=250).delay_seconds == 0.25

    def test_negative_attempts_rejected(self):
        with pytest.raises(ValueError, match="retry_attempts"):
            RetryConfig(retry_attempts=-1)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError, match="delay_ms"):
            RetryConfig(delay_ms=-5)
