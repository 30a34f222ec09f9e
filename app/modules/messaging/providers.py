"""
Factory functions for dependency injection of the messaging module.

Provides application-scoped singletons. Tests override them through
``app.dependency_overrides`` or by calling ``cache_clear()``.
"""

from functools import lru_cache

from infrastructure.services.providers import get_settings
from modules.messaging.core.service import MessageService


@lru_cache
def get_message_service() -> MessageService:
    """
    Get application-scoped message service singleton.

    Built from settings with in-memory repositories and the global channel
    type registry (built-in types registered on first use).

    Returns:
        MessageService: Cached service instance.
    """
    return MessageService(get_settings())
