"""Shared fixtures for the channel dispatch test suite."""

import pytest
import structlog

from infrastructure.configuration import Settings
from infrastructure.services.providers import get_settings


@pytest.fixture
def settings(monkeypatch):
    """Settings built from defaults only, isolated from the host environment."""
    for name in (
        "PREFIX",
        "LOG_LEVEL",
        "DISPATCH_MAX_WORKERS",
        "DISPATCH_REQUEST_TIMEOUT_MS",
        "DISPATCH_DEFAULT_BODY",
        "DISPATCH_POLL_INTERVAL_MS",
        "DISPATCH_RETRY_ENABLED",
        "MESSAGING_SEED_FILE",
        "TWILIO_API_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def _reset_logging_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
