"""Errors for the messaging module.

Only ``InvalidRequestError`` and ``PersistenceError`` ever leave the dispatch
engine. Everything else is raised by collaborators (repositories, registry,
renderer, aggregates) and converted into a failed ``MessageResult`` by the
engine.
"""

from typing import Any, Optional


class MessagingError(Exception):
    """Base class for all messaging errors."""


class InvalidRequestError(MessagingError):
    """Raised when a SendMessage request cannot be accepted at all."""


class PersistenceError(MessagingError):
    """Raised when the message aggregate could not be saved or updated.

    Attributes:
        aggregate: the in-memory message at the time of failure, if any
    """

    def __init__(self, message: str, aggregate: Any = None):
        super().__init__(message)
        self.aggregate = aggregate


class NotFoundError(MessagingError):
    """Base class for repository lookups that found nothing."""

    entity = "entity"

    def __init__(self, entity_id: str):
        super().__init__(f"{self.entity} not found: {entity_id}")
        self.entity_id = entity_id


class ChannelNotFoundError(NotFoundError):
    entity = "channel"


class TemplateNotFoundError(NotFoundError):
    entity = "template"


class MessageNotFoundError(NotFoundError):
    entity = "message"


class DuplicateEntityError(MessagingError):
    """Raised when saving an entity whose id or live name is already taken."""


class EntityDeletedError(MessagingError):
    """Raised when mutating a soft-deleted channel or template."""


class DuplicateResultError(MessagingError):
    """Raised when a message already holds a result for a channel."""

    def __init__(self, channel_id: str):
        super().__init__(f"result for channel {channel_id} already exists")
        self.channel_id = channel_id


class MissingVariableError(MessagingError):
    """Raised by the renderer when a placeholder has no value."""

    def __init__(self, name: str):
        super().__init__(f"missing variable: {name}")
        self.name = name


class ChannelTypeAlreadyRegisteredError(MessagingError):
    def __init__(self, name: str):
        super().__init__(f"channel type {name} already registered")
        self.name = name


class ChannelTypeNotFoundError(MessagingError):
    def __init__(self, name: str):
        super().__init__(f"channel type {name} not found")
        self.name = name


class RegistryFrozenError(MessagingError):
    """Raised when registering a channel type after start-up has completed."""

    def __init__(self, name: Optional[str] = None):
        super().__init__(
            f"channel type registry is frozen, cannot register {name or 'definition'}"
        )
