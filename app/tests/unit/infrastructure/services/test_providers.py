"""Unit tests for dependency injection providers."""

import pytest

from infrastructure.configuration import Settings
from infrastructure.services.providers import get_settings
from modules.messaging.channel_types import set_channel_type_registry
from modules.messaging.core.service import MessageService
from modules.messaging.providers import get_message_service


@pytest.fixture
def fresh_service_cache(clear_settings_cache):
    set_channel_type_registry(None)
    get_message_service.cache_clear()
    yield
    service = get_message_service()
    service.shutdown()
    get_message_service.cache_clear()
    set_channel_type_registry(None)


@pytest.mark.unit
class TestProviders:
    def test_get_settings_returns_settings(self, clear_settings_cache):
        assert isinstance(get_settings(), Settings)

    def test_get_settings_is_cached(self, clear_settings_cache):
        assert get_settings() is get_settings()

    def test_get_message_service_is_cached(self, fresh_service_cache):
        service = get_message_service()
        assert isinstance(service, MessageService)
        assert get_message_service() is service

    def test_message_service_uses_settings(self, fresh_service_cache, monkeypatch):
        monkeypatch.setenv("DISPATCH_DEFAULT_BODY", "configured")
        get_settings.cache_clear()

        service = get_message_service()

        assert service._settings.messaging.default_body == "configured"
