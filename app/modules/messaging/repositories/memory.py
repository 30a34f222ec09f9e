"""Thread-safe in-memory repositories.

Used by tests and by single-process deployments. Channels and templates are
immutable records and are stored as-is; messages are mutable aggregates and
are copied on the way in and out so callers never share state with the store.
"""

import threading
from typing import Dict, List, Optional

from infrastructure.logging import get_module_logger
from modules.messaging.domain.errors import (
    ChannelNotFoundError,
    DuplicateEntityError,
    MessageNotFoundError,
    TemplateNotFoundError,
)
from modules.messaging.domain.models import Channel, Message, Template

logger = get_module_logger()


class InMemoryChannelRepository:
    def __init__(self):
        self._channels: Dict[str, Channel] = {}
        self._lock = threading.Lock()

    def save(self, channel: Channel) -> None:
        with self._lock:
            if channel.id in self._channels:
                raise DuplicateEntityError(f"channel {channel.id} already exists")
            if not channel.is_deleted and self._name_taken(channel.name, channel.id):
                raise DuplicateEntityError(f"channel name {channel.name} already in use")
            self._channels[channel.id] = channel
        logger.debug("channel_saved", channel_id=channel.id, channel_type=channel.channel_type)

    def update(self, channel: Channel) -> None:
        with self._lock:
            if channel.id not in self._channels:
                raise ChannelNotFoundError(channel.id)
            self._channels[channel.id] = channel

    def mark_used(self, channel_id: str, at: int) -> None:
        with self._lock:
            channel = self._channels.get(channel_id)
            if channel is None:
                raise ChannelNotFoundError(channel_id)
            self._channels[channel_id] = channel.mark_as_used(at)

    def find_by_id(self, channel_id: str) -> Channel:
        with self._lock:
            channel = self._channels.get(channel_id)
        if channel is None or channel.is_deleted:
            raise ChannelNotFoundError(channel_id)
        return channel

    def find_by_name(self, name: str) -> Channel:
        with self._lock:
            for channel in self._channels.values():
                if channel.name == name and not channel.is_deleted:
                    return channel
        raise ChannelNotFoundError(name)

    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        with self._lock:
            return self._name_taken(name, exclude_id)

    def _name_taken(self, name: str, exclude_id: Optional[str]) -> bool:
        return any(
            channel.name == name and not channel.is_deleted and channel.id != exclude_id
            for channel in self._channels.values()
        )


class InMemoryTemplateRepository:
    def __init__(self):
        self._templates: Dict[str, Template] = {}
        self._lock = threading.Lock()

    def save(self, template: Template) -> None:
        with self._lock:
            if template.id in self._templates:
                raise DuplicateEntityError(f"template {template.id} already exists")
            if not template.is_deleted and self._name_taken(template.name, template.id):
                raise DuplicateEntityError(f"template name {template.name} already in use")
            self._templates[template.id] = template
        logger.debug("template_saved", template_id=template.id)

    def update(self, template: Template) -> None:
        with self._lock:
            if template.id not in self._templates:
                raise TemplateNotFoundError(template.id)
            self._templates[template.id] = template

    def find_by_id(self, template_id: str) -> Template:
        with self._lock:
            template = self._templates.get(template_id)
        if template is None or template.is_deleted:
            raise TemplateNotFoundError(template_id)
        return template

    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        with self._lock:
            return self._name_taken(name, exclude_id)

    def _name_taken(self, name: str, exclude_id: Optional[str]) -> bool:
        return any(
            template.name == name and not template.is_deleted and template.id != exclude_id
            for template in self._templates.values()
        )


class InMemoryMessageRepository:
    def __init__(self):
        self._messages: Dict[str, Message] = {}
        self._lock = threading.Lock()

    def save(self, message: Message) -> None:
        snapshot = message.model_copy(deep=True)
        with self._lock:
            if message.id in self._messages:
                raise DuplicateEntityError(f"message {message.id} already exists")
            self._messages[message.id] = snapshot

    def update(self, message: Message) -> None:
        snapshot = message.model_copy(deep=True)
        with self._lock:
            if message.id not in self._messages:
                raise MessageNotFoundError(message.id)
            self._messages[message.id] = snapshot

    def find_by_id(self, message_id: str) -> Message:
        with self._lock:
            message = self._messages.get(message_id)
        if message is None:
            raise MessageNotFoundError(message_id)
        return message.model_copy(deep=True)

    def list_recent(self, limit: int = 50) -> List[Message]:
        with self._lock:
            # newest insertion first among equal timestamps
            messages = list(reversed(self._messages.values()))
        messages.sort(key=lambda m: m.created_at, reverse=True)
        return [m.model_copy(deep=True) for m in messages[:limit]]
