"""Channel type registry.

Provides thread-safe registration and retrieval of channel type definitions.
Registration happens at start-up; ``freeze()`` then makes the registry
read-only for the rest of the process.
"""

import threading
from typing import Any, Dict, List, Optional

import structlog

from infrastructure.configuration import Settings
from modules.messaging.channel_types.base import ChannelTypeDefinition
from modules.messaging.channel_types.email import EmailChannelType
from modules.messaging.channel_types.slack import SlackChannelType
from modules.messaging.channel_types.sms import SmsChannelType
from modules.messaging.domain.errors import (
    ChannelTypeAlreadyRegisteredError,
    ChannelTypeNotFoundError,
    RegistryFrozenError,
)

logger = structlog.get_logger()


class ChannelTypeRegistry:
    """Thread-safe registry of channel type definitions keyed by name.

    Attributes:
        _definitions: Dict mapping type name to its definition.
        _lock: Guards mutation, and reads until the registry is frozen.
    """

    def __init__(self):
        self._definitions: Dict[str, ChannelTypeDefinition] = {}
        self._lock = threading.Lock()
        self._frozen = False

    def register(self, definition: ChannelTypeDefinition) -> None:
        """Register a channel type definition.

        Raises:
            ValueError: If the definition has an empty name.
            ChannelTypeAlreadyRegisteredError: If the name is already registered.
            RegistryFrozenError: If the registry has been frozen.
        """
        name = (getattr(definition, "name", "") or "").strip()
        if not name:
            raise ValueError("channel type name cannot be empty")

        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(name)
            if name in self._definitions:
                raise ChannelTypeAlreadyRegisteredError(name)
            self._definitions[name] = definition

        logger.info(
            "channel_type_registered",
            channel_type=name,
            display_name=definition.display_name,
        )

    def get(self, name: str) -> ChannelTypeDefinition:
        """Get a definition by name.

        Raises:
            ChannelTypeNotFoundError: If no definition is registered under ``name``.
        """
        definition = self._lookup(name)
        if definition is None:
            raise ChannelTypeNotFoundError(name)
        return definition

    def is_valid(self, name: str) -> bool:
        return self._lookup(name) is not None

    def list_names(self) -> List[str]:
        """Sorted snapshot of registered type names."""
        if self._frozen:
            return sorted(self._definitions)
        with self._lock:
            return sorted(self._definitions)

    def list_definitions(self) -> List[ChannelTypeDefinition]:
        if self._frozen:
            definitions = dict(self._definitions)
        else:
            with self._lock:
                definitions = dict(self._definitions)
        return [definitions[name] for name in sorted(definitions)]

    def describe(self) -> List[Dict[str, Any]]:
        return [definition.describe() for definition in self.list_definitions()]

    def count(self) -> int:
        with self._lock:
            return len(self._definitions)

    def freeze(self) -> None:
        """Reject further registrations; reads no longer take the lock."""
        with self._lock:
            self._frozen = True
        logger.info("channel_type_registry_frozen", channel_types=self.list_names())

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def clear(self) -> None:
        """Remove all definitions and unfreeze. Primarily used for testing."""
        with self._lock:
            self._definitions.clear()
            self._frozen = False
            logger.debug("channel_type_registry_cleared")

    def _lookup(self, name: str) -> Optional[ChannelTypeDefinition]:
        if self._frozen:
            return self._definitions.get(name)
        with self._lock:
            return self._definitions.get(name)


def default_channel_types(settings: Optional[Settings] = None) -> List[ChannelTypeDefinition]:
    """Built-in definitions configured from ``settings``."""
    if settings is None:
        from infrastructure.services.providers import get_settings

        settings = get_settings()
    return [
        EmailChannelType(local_hostname=settings.smtp.SMTP_LOCAL_HOSTNAME),
        SlackChannelType(),
        SmsChannelType(api_url=settings.twilio.TWILIO_API_URL),
    ]


def register_default_channel_types(
    registry: Optional[ChannelTypeRegistry] = None,
    settings: Optional[Settings] = None,
) -> ChannelTypeRegistry:
    """Register the built-in channel types that are not registered yet.

    Safe to call more than once; returns the registry it populated.
    """
    registry = registry or get_channel_type_registry()
    with _defaults_lock:
        for definition in default_channel_types(settings):
            if not registry.is_valid(definition.name):
                registry.register(definition)
    return registry


# Global registry instance
_global_registry: Optional[ChannelTypeRegistry] = None
_global_registry_lock = threading.Lock()
_defaults_lock = threading.Lock()


def get_channel_type_registry() -> ChannelTypeRegistry:
    """Get the global channel type registry singleton.

    Thread-safe singleton pattern. Creates the registry on first call.
    """
    global _global_registry

    if _global_registry is None:
        with _global_registry_lock:
            # Double-check locking pattern
            if _global_registry is None:
                _global_registry = ChannelTypeRegistry()
                logger.debug("global_channel_type_registry_initialized")

    return _global_registry


def set_channel_type_registry(registry: Optional[ChannelTypeRegistry]) -> None:
    """Replace the global registry, e.g. with a test double. ``None`` resets it."""
    global _global_registry

    with _global_registry_lock:
        _global_registry = registry
