"""Repositories for channels, templates and messages."""

from modules.messaging.repositories.base import (
    ChannelRepository,
    MessageRepository,
    TemplateRepository,
)
from modules.messaging.repositories.memory import (
    InMemoryChannelRepository,
    InMemoryMessageRepository,
    InMemoryTemplateRepository,
)
from modules.messaging.repositories.seed import load_seed_data, load_seed_file

__all__ = [
    "ChannelRepository",
    "InMemoryChannelRepository",
    "InMemoryMessageRepository",
    "InMemoryTemplateRepository",
    "MessageRepository",
    "TemplateRepository",
    "load_seed_data",
    "load_seed_file",
]
