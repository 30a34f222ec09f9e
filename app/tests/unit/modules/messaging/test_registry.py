"""Unit tests for the channel type registry."""

import threading

import pytest

from modules.messaging.channel_types import (
    ChannelTypeRegistry,
    EmailChannelType,
    SlackChannelType,
    SmsChannelType,
    get_channel_type_registry,
    register_default_channel_types,
    set_channel_type_registry,
)
from modules.messaging.domain.errors import (
    ChannelTypeAlreadyRegisteredError,
    ChannelTypeNotFoundError,
    RegistryFrozenError,
)

from tests.factories.messaging import FakeChannelType


def _definition(name):
    return FakeChannelType(name)


@pytest.mark.unit
class TestChannelTypeRegistry:
    def test_register_and_get(self):
        registry = ChannelTypeRegistry()
        definition = _definition("pager")

        registry.register(definition)

        assert registry.get("pager") is definition
        assert registry.is_valid("pager")
        assert registry.count() == 1

    def test_get_unknown_raises(self):
        with pytest.raises(ChannelTypeNotFoundError):
            ChannelTypeRegistry().get("pager")

    def test_duplicate_registration_rejected(self):
        registry = ChannelTypeRegistry()
        registry.register(_definition("pager"))
        with pytest.raises(ChannelTypeAlreadyRegisteredError):
            registry.register(_definition("pager"))

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            ChannelTypeRegistry().register(_definition("  "))

    def test_list_names_sorted(self):
        registry = ChannelTypeRegistry()
        for name in ("sms", "email", "slack"):
            registry.register(_definition(name))
        assert registry.list_names() == ["email", "slack", "sms"]
        assert [d.name for d in registry.list_definitions()] == ["email", "slack", "sms"]

    def test_freeze_rejects_registration_but_allows_reads(self):
        registry = ChannelTypeRegistry()
        registry.register(_definition("email"))
        registry.freeze()

        with pytest.raises(RegistryFrozenError):
            registry.register(_definition("pager"))
        assert registry.is_frozen
        assert registry.get("email").name == "email"

    def test_clear_unfreezes(self):
        registry = ChannelTypeRegistry()
        registry.register(_definition("email"))
        registry.freeze()
        registry.clear()
        assert registry.count() == 0
        assert not registry.is_frozen

    def test_concurrent_registration(self):
        registry = ChannelTypeRegistry()
        threads = [
            threading.Thread(target=registry.register, args=(_definition(f"type-{i}"),))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert registry.count() == 20

    def test_describe(self):
        registry = ChannelTypeRegistry()
        registry.register(SlackChannelType())
        described = registry.describe()[0]
        assert described["name"] == "slack"
        assert described["recipient_types"] == ["channel", "user", "webhook"]
        assert "webhook_url" in described["config_schema"]["properties"]


@pytest.mark.unit
class TestDefaultChannelTypes:
    def test_registers_builtins(self, settings):
        registry = register_default_channel_types(ChannelTypeRegistry(), settings)
        assert registry.list_names() == ["email", "slack", "sms"]
        assert isinstance(registry.get("email"), EmailChannelType)
        assert isinstance(registry.get("sms"), SmsChannelType)

    def test_idempotent(self, settings):
        registry = ChannelTypeRegistry()
        register_default_channel_types(registry, settings)
        register_default_channel_types(registry, settings)
        assert registry.count() == 3

    def test_keeps_existing_definition(self, settings):
        registry = ChannelTypeRegistry()
        custom = _definition("email")
        registry.register(custom)

        register_default_channel_types(registry, settings)

        assert registry.get("email") is custom

    def test_global_registry_singleton(self):
        assert get_channel_type_registry() is get_channel_type_registry()

    def test_set_global_registry(self):
        registry = ChannelTypeRegistry()
        set_channel_type_registry(registry)
        assert get_channel_type_registry() is registry
