"""Domain models for channels, templates and messages.

Channels, recipients, templates and results are immutable pydantic records:
named mutators return an updated copy, re-validated on the way out. The
``Message`` aggregate is the one mutable model; it is owned by a single
dispatch and only changes through ``add_result`` / ``update_result``, which
keep ``status`` in step with ``results``.

Key distinctions:
  - models.py: domain records with invariants (pydantic, validated)
  - api/schemas.py: HTTP request/response contracts
  - channel_types/*: typed per-type channel configuration
"""

import re
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.messaging.domain.errors import (
    DuplicateResultError,
    EntityDeletedError,
    InvalidRequestError,
)
from modules.messaging.domain.types import ErrorCode, MessageStatus, ResultStatus

CHANNEL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
MAX_CHANNEL_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_TEMPLATE_NAME_LENGTH = 100
MAX_SUBJECT_LENGTH = 200
MAX_BODY_LENGTH = 10000


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_channel_id() -> str:
    return f"channel_{uuid.uuid4()}"


def new_template_id() -> str:
    return f"tpl_{uuid.uuid4()}"


def new_message_id() -> str:
    """Message ids embed their creation time: ``msg_<unix seconds>_<8 hex>``."""
    return f"msg_{int(time.time())}_{uuid.uuid4().hex[:8]}"


def dedupe_channel_ids(channel_ids: Iterable[str]) -> List[str]:
    """Collapse duplicate ids, keeping the first occurrence of each."""
    return list(dict.fromkeys(channel_ids))


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    def _evolve(self, **changes: Any):
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**dict(self), **changes})


class Recipient(_Record):
    """A delivery address within a channel.

    ``type`` is interpreted by the channel type (``to``/``cc``/``bcc`` for
    email, ``channel``/``user`` for slack, ``sms`` for sms).
    """

    name: str
    type: str
    target: str

    @field_validator("name", "type", "target")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v


class CommonSettings(_Record):
    """Per-channel delivery settings. Durations are milliseconds."""

    timeout: int = Field(default=30000, gt=0)
    retry_attempts: int = Field(default=3, ge=0)
    retry_delay: int = Field(default=1000, ge=0)


class CommonSettingsOverride(_Record):
    """Partial CommonSettings for one request. Unset fields keep the channel's values."""

    timeout: Optional[int] = Field(default=None, gt=0)
    retry_attempts: Optional[int] = Field(default=None, ge=0)
    retry_delay: Optional[int] = Field(default=None, ge=0)

    def apply_to(self, settings: CommonSettings) -> CommonSettings:
        changes = self.model_dump(exclude_none=True)
        if not changes:
            return settings
        return settings._evolve(**changes)


class Channel(_Record):
    """An addressable delivery endpoint of a registered channel type."""

    id: str = Field(default_factory=new_channel_id)
    name: str
    description: str = ""
    enabled: bool = True
    channel_type: str
    template_id: Optional[str] = None
    common_settings: CommonSettings = Field(default_factory=CommonSettings)
    config: Dict[str, Any] = Field(default_factory=dict)
    recipients: List[Recipient] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    deleted_at: Optional[int] = None
    last_used: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("channel name cannot be empty")
        if len(v) > MAX_CHANNEL_NAME_LENGTH:
            raise ValueError(
                f"channel name cannot exceed {MAX_CHANNEL_NAME_LENGTH} characters"
            )
        if not CHANNEL_NAME_PATTERN.match(v):
            raise ValueError(
                "channel name can only contain letters, numbers, underscores, and hyphens"
            )
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if len(v) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
            )
        return v

    @field_validator("channel_type")
    @classmethod
    def validate_channel_type(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("channel type cannot be empty")
        return v

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def can_send(self) -> bool:
        return not self.is_deleted and self.enabled and bool(self.recipients)

    def _touch(self, **changes: Any) -> "Channel":
        if self.is_deleted:
            raise EntityDeletedError(f"channel {self.id} is deleted")
        return self._evolve(updated_at=now_ms(), **changes)

    def enable(self) -> "Channel":
        return self._touch(enabled=True)

    def disable(self) -> "Channel":
        return self._touch(enabled=False)

    def update_recipients(self, recipients: List[Recipient]) -> "Channel":
        return self._touch(recipients=list(recipients))

    def update_config(self, config: Dict[str, Any]) -> "Channel":
        return self._touch(config=dict(config))

    def update_common_settings(self, settings: CommonSettings) -> "Channel":
        return self._touch(common_settings=settings)

    def set_template(self, template_id: Optional[str]) -> "Channel":
        return self._touch(template_id=template_id)

    def mark_as_used(self, at: Optional[int] = None) -> "Channel":
        """Record a successful send. Allowed on any channel, including deleted ones."""
        at = at if at is not None else now_ms()
        return self._evolve(last_used=at, updated_at=at)

    def delete(self, at: Optional[int] = None) -> "Channel":
        if self.is_deleted:
            raise EntityDeletedError(f"channel {self.id} is already deleted")
        at = at if at is not None else now_ms()
        return self._evolve(deleted_at=at, updated_at=at)

    def with_recipients(self, recipients: List[Recipient]) -> "Channel":
        """Copy carrying different recipients for a single send; timestamps untouched."""
        return self.model_copy(update={"recipients": list(recipients)})


class Template(_Record):
    """A typed subject/body pair with ``{name}`` placeholders."""

    id: str = Field(default_factory=new_template_id)
    name: str
    description: str = ""
    channel_type: str
    subject: Optional[str] = None
    body: str
    tags: List[str] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    deleted_at: Optional[int] = None
    version: int = Field(default=1, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("template name cannot be empty")
        if len(v) > MAX_TEMPLATE_NAME_LENGTH:
            raise ValueError(
                f"template name cannot exceed {MAX_TEMPLATE_NAME_LENGTH} characters"
            )
        return v

    @field_validator("channel_type")
    @classmethod
    def validate_channel_type(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("channel type cannot be empty")
        return v

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > MAX_SUBJECT_LENGTH:
            raise ValueError(f"subject cannot exceed {MAX_SUBJECT_LENGTH} characters")
        return v

    @field_validator("body")
    @classmethod
    def validate_body(cls, v: str) -> str:
        if len(v) == 0:
            raise ValueError("template body cannot be empty")
        if len(v) > MAX_BODY_LENGTH:
            raise ValueError(f"template body cannot exceed {MAX_BODY_LENGTH} characters")
        return v

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def _bump(self, **changes: Any) -> "Template":
        if self.is_deleted:
            raise EntityDeletedError(f"template {self.id} is deleted")
        return self._evolve(updated_at=now_ms(), version=self.version + 1, **changes)

    def update_content(self, subject: Optional[str], body: str) -> "Template":
        return self._bump(subject=subject, body=body)

    def update_description(self, description: str) -> "Template":
        return self._bump(description=description)

    def delete(self) -> "Template":
        at = now_ms()
        return self._bump(deleted_at=at)


class ChannelOverride(_Record):
    """Per-request adjustments for one channel. ``None`` means "use the channel's"."""

    recipients: Optional[List[Recipient]] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    common_settings: Optional[CommonSettingsOverride] = None


class MessageError(_Record):
    code: ErrorCode
    details: str = ""


class MessageResult(_Record):
    """Outcome of dispatching a message to one channel."""

    channel_id: str
    status: ResultStatus
    message: str
    error: Optional[MessageError] = None
    sent_at: Optional[int] = None

    @model_validator(mode="after")
    def validate_outcome(self) -> "MessageResult":
        if self.status == ResultStatus.SUCCESS:
            if self.sent_at is None or self.error is not None:
                raise ValueError("successful result requires sent_at and no error")
        elif self.error is None or self.sent_at is not None:
            raise ValueError("failed result requires an error and no sent_at")
        return self

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILED

    @classmethod
    def success(
        cls,
        channel_id: str,
        sent_at: Optional[int] = None,
        message: str = "Message sent successfully",
    ) -> "MessageResult":
        return cls(
            channel_id=channel_id,
            status=ResultStatus.SUCCESS,
            message=message,
            sent_at=sent_at if sent_at is not None else now_ms(),
        )

    @classmethod
    def failure(
        cls, channel_id: str, code: ErrorCode, message: str, details: str = ""
    ) -> "MessageResult":
        return cls(
            channel_id=channel_id,
            status=ResultStatus.FAILED,
            message=message,
            error=MessageError(code=code, details=details),
        )


def derive_status(results: List[MessageResult], expected: int) -> MessageStatus:
    """Aggregate status as a pure function of the results so far."""
    if not results or len(results) < expected:
        return MessageStatus.PENDING
    successes = sum(1 for result in results if result.is_success)
    if successes == len(results):
        return MessageStatus.SUCCESS
    if successes == 0:
        return MessageStatus.FAILED
    return MessageStatus.PARTIAL_SUCCESS


class Message(BaseModel):
    """Aggregate root for one dispatch; owns one result per channel."""

    id: str = Field(default_factory=new_message_id)
    channel_ids: List[str] = Field(min_length=1)
    variables: Dict[str, Any] = Field(default_factory=dict)
    channel_overrides: Dict[str, ChannelOverride] = Field(default_factory=dict)
    status: MessageStatus = MessageStatus.PENDING
    results: List[MessageResult] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)

    @classmethod
    def create(
        cls,
        channel_ids: Iterable[str],
        variables: Optional[Dict[str, Any]] = None,
        channel_overrides: Optional[Dict[str, ChannelOverride]] = None,
    ) -> "Message":
        """Build a pending message, collapsing duplicate channel ids.

        Raises:
            InvalidRequestError: if no channel id remains.
        """
        unique = dedupe_channel_ids(channel_ids)
        if not unique:
            raise InvalidRequestError("at least one channel id is required")
        return cls(
            channel_ids=unique,
            variables=dict(variables or {}),
            channel_overrides=dict(channel_overrides or {}),
        )

    def override_for(self, channel_id: str) -> Optional[ChannelOverride]:
        return self.channel_overrides.get(channel_id)

    def add_result(self, result: MessageResult) -> None:
        """Append a result and recompute the status.

        Raises:
            DuplicateResultError: if the channel already has a result.
            ValueError: if the channel is not targeted by this message.
        """
        if result.channel_id not in self.channel_ids:
            raise ValueError(f"channel {result.channel_id} is not part of message {self.id}")
        if self.get_result(result.channel_id) is not None:
            raise DuplicateResultError(result.channel_id)
        self.results.append(result)
        self._update_status()

    def update_result(self, result: MessageResult) -> None:
        """Replace the existing result for ``result.channel_id`` in place."""
        for index, existing in enumerate(self.results):
            if existing.channel_id == result.channel_id:
                self.results[index] = result
                self._update_status()
                return
        raise ValueError(f"no result for channel {result.channel_id}")

    def get_result(self, channel_id: str) -> Optional[MessageResult]:
        return next((r for r in self.results if r.channel_id == channel_id), None)

    def is_completed(self) -> bool:
        return self.status.is_terminal

    def successful_results(self) -> List[MessageResult]:
        return [r for r in self.results if r.is_success]

    def failed_results(self) -> List[MessageResult]:
        return [r for r in self.results if r.is_failure]

    def successful_channels(self) -> List[str]:
        return [r.channel_id for r in self.successful_results()]

    def failed_channels(self) -> List[str]:
        return [r.channel_id for r in self.failed_results()]

    def _update_status(self) -> None:
        self.status = derive_status(self.results, len(self.channel_ids))
