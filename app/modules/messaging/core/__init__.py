"""Core layer - the dispatch engine and its service facade."""

from modules.messaging.core.dispatcher import MessageDispatcher
from modules.messaging.core.service import MessageService

__all__ = ["MessageDispatcher", "MessageService"]
