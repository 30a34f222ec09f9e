"""API request and response schemas for the messaging endpoints.

Key distinction from domain/models.py:
  - schemas.py: HTTP contracts (what clients send and receive)
  - models.py: domain records with invariants used by the engine

Request models reuse the domain value records (Recipient, CommonSettingsOverride)
so their validation rules apply at the edge as well.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from modules.messaging.domain.models import (
    ChannelOverride,
    CommonSettingsOverride,
    Message,
    Recipient,
)
from modules.messaging.domain.types import ErrorCode, MessageStatus, ResultStatus


class ChannelOverrideRequest(BaseModel):
    """Per-channel adjustments for a single request."""

    recipients: Optional[List[Recipient]] = Field(
        default=None, description="Replace the channel's recipients for this message"
    )
    subject: Optional[str] = Field(default=None, description="Replace the subject")
    body: Optional[str] = Field(default=None, description="Replace the body")
    common_settings: Optional[CommonSettingsOverride] = Field(
        default=None,
        description="Override timeout and retry settings; omitted fields keep the channel's",
    )

    def to_domain(self) -> ChannelOverride:
        return ChannelOverride(
            recipients=self.recipients,
            subject=self.subject,
            body=self.body,
            common_settings=self.common_settings,
        )


class SendMessageRequest(BaseModel):
    """Request body for ``POST /messages``."""

    channel_ids: List[str] = Field(
        ..., description="Target channels, duplicates are collapsed"
    )
    variables: Optional[Dict[str, Any]] = Field(
        default=None, description="Values substituted into {placeholders}"
    )
    channel_overrides: Dict[str, ChannelOverrideRequest] = Field(default_factory=dict)
    timeout_ms: Optional[int] = Field(
        default=None, gt=0, description="Deadline for the whole request in milliseconds"
    )

    def overrides(self) -> Dict[str, ChannelOverride]:
        return {
            channel_id: override.to_domain()
            for channel_id, override in self.channel_overrides.items()
        }


class MessageErrorResponse(BaseModel):
    code: ErrorCode
    details: str


class MessageResultResponse(BaseModel):
    channel_id: str
    status: ResultStatus
    message: str
    error: Optional[MessageErrorResponse] = None
    sent_at: Optional[int] = None


class MessageResponse(BaseModel):
    """Serialized message aggregate with per-channel results."""

    id: str
    channel_ids: List[str]
    variables: Dict[str, Any]
    status: MessageStatus
    results: List[MessageResultResponse]
    created_at: int

    @classmethod
    def from_domain(cls, message: Message) -> "MessageResponse":
        return cls.model_validate(message.model_dump(exclude={"channel_overrides"}))


class ChannelTypeResponse(BaseModel):
    name: str
    display_name: str
    description: str
    recipient_types: List[str]
    config_schema: Dict[str, Any]
