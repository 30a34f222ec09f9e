"""Domain layer - data models, types, and errors."""

from modules.messaging.domain.errors import (
    ChannelNotFoundError,
    ChannelTypeAlreadyRegisteredError,
    ChannelTypeNotFoundError,
    DuplicateEntityError,
    DuplicateResultError,
    EntityDeletedError,
    InvalidRequestError,
    MessageNotFoundError,
    MessagingError,
    MissingVariableError,
    NotFoundError,
    PersistenceError,
    RegistryFrozenError,
    TemplateNotFoundError,
)
from modules.messaging.domain.models import (
    Channel,
    ChannelOverride,
    CommonSettings,
    CommonSettingsOverride,
    Message,
    MessageError,
    MessageResult,
    Recipient,
    Template,
    dedupe_channel_ids,
    derive_status,
    now_ms,
)
from modules.messaging.domain.types import (
    ErrorCode,
    MessageStatus,
    ResultStatus,
    ValidationErrorKind,
)

__all__ = [
    "Channel",
    "ChannelNotFoundError",
    "ChannelOverride",
    "ChannelTypeAlreadyRegisteredError",
    "ChannelTypeNotFoundError",
    "CommonSettings",
    "CommonSettingsOverride",
    "DuplicateEntityError",
    "DuplicateResultError",
    "EntityDeletedError",
    "ErrorCode",
    "InvalidRequestError",
    "Message",
    "MessageError",
    "MessageNotFoundError",
    "MessageResult",
    "MessageStatus",
    "MessagingError",
    "MissingVariableError",
    "NotFoundError",
    "PersistenceError",
    "Recipient",
    "RegistryFrozenError",
    "ResultStatus",
    "Template",
    "TemplateNotFoundError",
    "ValidationErrorKind",
    "dedupe_channel_ids",
    "derive_status",
    "now_ms",
]
