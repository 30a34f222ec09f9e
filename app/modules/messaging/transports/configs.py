"""Typed channel configuration per channel type.

Channel configs arrive as free-form mappings (JSON bodies, seed files). They
are validated into these models before any transport touches them. Numeric
fields accept integers, JSON-style floats (``587.0``) and numeric strings.
"""

import re
from typing import Any, Literal, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from infrastructure.operations import OperationResult

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


class ChannelConfig(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class EmailConfig(ChannelConfig):
    """SMTP connection and sender settings for ``email`` channels."""

    smtp_host: str = Field(min_length=1, description="SMTP server hostname")
    smtp_port: int = Field(ge=1, le=65535, description="SMTP server port")
    username: str = Field(min_length=1, description="SMTP username")
    password: str = Field(min_length=1, description="SMTP password")
    from_email: EmailStr = Field(description="Sender e-mail address")
    from_name: Optional[str] = Field(default=None, description="Sender display name")
    use_tls: bool = Field(default=True, description="Upgrade the connection with STARTTLS")


class SlackConfig(ChannelConfig):
    """Incoming webhook settings for ``slack`` channels."""

    webhook_url: str = Field(min_length=1, description="Slack incoming webhook URL")
    channel: Optional[str] = Field(default=None, description="Default channel override")
    username: Optional[str] = Field(default=None, description="Bot display name")
    icon_emoji: Optional[str] = Field(default=None, description="Bot icon emoji")
    icon_url: Optional[str] = Field(default=None, description="Bot icon URL")

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("webhook_url must be an http(s) URL")
        return v


class SmsConfig(ChannelConfig):
    """Provider credentials for ``sms`` channels."""

    provider: Literal["twilio"] = Field(description="SMS provider, only twilio is supported")
    account_sid: str = Field(min_length=1, description="Twilio account SID")
    auth_token: str = Field(min_length=1, description="Twilio auth token")
    from_number: str = Field(description="Sender number in E.164 format")

    @field_validator("from_number")
    @classmethod
    def validate_from_number(cls, v: str) -> str:
        if not E164_PATTERN.match(v):
            raise ValueError("from_number must be in E.164 format, e.g. +15551234567")
        return v


def validate_config_model(
    model: Type[ChannelConfig], config: Optional[Mapping[str, Any]]
) -> OperationResult:
    """Validate ``config`` against ``model``.

    Returns:
        SUCCESS carrying the typed config, or PERMANENT_ERROR with error_code
        ``INVALID_CONFIG`` and ``data={"field": ..., "message": ...}`` for the
        first offending field.
    """
    try:
        parsed = model.model_validate(dict(config or {}))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "config"
        message = first["msg"]
        return OperationResult.permanent_error(
            f"{field}: {message}",
            error_code="INVALID_CONFIG",
            data={"field": field, "message": message},
        )
    return OperationResult.success(data=parsed)
