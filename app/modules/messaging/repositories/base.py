"""Repository interfaces consumed by the dispatch engine.

The protocol-based design allows for multiple storage backends. Read
operations on channels and templates never return soft-deleted entities.
"""

from typing import List, Optional, Protocol

from modules.messaging.domain.models import Channel, Message, Template


class ChannelRepository(Protocol):
    """Storage interface for channels.

    Methods:
        save: Persist a new channel
        update: Replace a stored channel, deleted ones included
        mark_used: Set ``last_used`` on the stored channel, leaving other fields as stored
        find_by_id: Live channel by id, raises ChannelNotFoundError
        find_by_name: Live channel by name, raises ChannelNotFoundError
        exists_by_name: Whether a live channel uses ``name``
    """

    def save(self, channel: Channel) -> None:
        ...

    def update(self, channel: Channel) -> None:
        ...

    def mark_used(self, channel_id: str, at: int) -> None:
        ...

    def find_by_id(self, channel_id: str) -> Channel:
        ...

    def find_by_name(self, name: str) -> Channel:
        ...

    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        ...


class TemplateRepository(Protocol):
    """Storage interface for templates.

    Methods:
        save: Persist a new template
        update: Replace a stored template
        find_by_id: Live template by id, raises TemplateNotFoundError
        exists_by_name: Whether a live template uses ``name``
    """

    def save(self, template: Template) -> None:
        ...

    def update(self, template: Template) -> None:
        ...

    def find_by_id(self, template_id: str) -> Template:
        ...

    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        ...


class MessageRepository(Protocol):
    """Storage interface for message aggregates.

    ``save`` and ``update`` persist the aggregate together with all of its
    results atomically. ``find_by_id`` returns a message equal by value to
    the one last written, results in insertion order.
    """

    def save(self, message: Message) -> None:
        ...

    def update(self, message: Message) -> None:
        ...

    def find_by_id(self, message_id: str) -> Message:
        ...

    def list_recent(self, limit: int = 50) -> List[Message]:
        ...
