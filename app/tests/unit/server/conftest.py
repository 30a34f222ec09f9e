"""Fixtures for server module unit tests."""

import pytest

from modules.messaging.channel_types import set_channel_type_registry
from modules.messaging.providers import get_message_service


@pytest.fixture(autouse=True)
def _fresh_application_state(clear_settings_cache, monkeypatch):
    monkeypatch.delenv("MESSAGING_SEED_FILE", raising=False)
    set_channel_type_registry(None)
    get_message_service.cache_clear()
    yield
    set_channel_type_registry(None)
    get_message_service.cache_clear()
