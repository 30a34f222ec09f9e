"""Enumerations shared by the messaging domain, engine and API."""

from enum import Enum


class MessageStatus(str, Enum):
    """Aggregate status of a message. ``PENDING`` is the only non-terminal value."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL_SUCCESS = "partial_success"

    @property
    def is_terminal(self) -> bool:
        return self is not MessageStatus.PENDING


class ResultStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class ErrorCode(str, Enum):
    """Channel-level failure codes recorded on a failed MessageResult."""

    CHANNEL_NOT_FOUND = "CHANNEL_NOT_FOUND"
    CHANNEL_DELETED = "CHANNEL_DELETED"
    CHANNEL_DISABLED = "CHANNEL_DISABLED"
    NO_RECIPIENTS = "NO_RECIPIENTS"
    UNKNOWN_CHANNEL_TYPE = "UNKNOWN_CHANNEL_TYPE"
    INVALID_CONFIG = "INVALID_CONFIG"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    MISSING_VARIABLES = "MISSING_VARIABLES"
    RENDER_ERROR = "RENDER_ERROR"
    SEND_ERROR = "SEND_ERROR"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"


class ValidationErrorKind(str, Enum):
    """Outcomes of ChannelValidator checks beyond the send-time codes."""

    NAME_TAKEN = "NAME_TAKEN"
