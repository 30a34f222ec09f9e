"""Messaging module feature settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class MessagingFeatureSettings(FeatureSettings):
    """Configuration for the message dispatch engine.

    Environment Variables:
        DISPATCH_MAX_WORKERS: Worker threads running transports under a deadline
        DISPATCH_REQUEST_TIMEOUT_MS: Request deadline applied when the caller gives none
        DISPATCH_DEFAULT_BODY: Body rendered when no template or override supplies one
        DISPATCH_POLL_INTERVAL_MS: How often cancellation is observed while a transport runs
        DISPATCH_RETRY_ENABLED: Retry transient transport errors (default: True)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        workers = settings.messaging.max_workers
        if settings.messaging.retry_enabled:
            # Honour channel retry settings...
        ```
    """

    max_workers: int = Field(
        default=8,
        alias="DISPATCH_MAX_WORKERS",
        description="Worker threads used to run transports",
    )
    request_timeout_ms: int = Field(
        default=60000,
        alias="DISPATCH_REQUEST_TIMEOUT_MS",
        description="Deadline for one SendMessage request (milliseconds)",
    )
    default_body: str = Field(
        default="Default message content",
        alias="DISPATCH_DEFAULT_BODY",
        description="Body used when neither a template nor an override supplies one",
    )
    poll_interval_ms: int = Field(
        default=50,
        alias="DISPATCH_POLL_INTERVAL_MS",
        description="Cancellation polling granularity while a transport runs (milliseconds)",
    )
    retry_enabled: bool = Field(
        default=True,
        alias="DISPATCH_RETRY_ENABLED",
        description="Retry transient transport errors using channel retry settings",
    )

    @field_validator("max_workers", "request_timeout_ms", "poll_interval_ms")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Worker counts and durations must be strictly positive."""
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v
