"""Fixtures for messaging module tests."""

import itertools

import pytest

from modules.messaging.channel_types import ChannelTypeRegistry, set_channel_type_registry
from modules.messaging.core.dispatcher import MessageDispatcher
from modules.messaging.providers import get_message_service
from modules.messaging.repositories import (
    InMemoryChannelRepository,
    InMemoryMessageRepository,
    InMemoryTemplateRepository,
)
from tests.factories.messaging import (
    FakeChannelType,
    FakeTransport,
    make_channel as build_channel,
    make_template as build_template,
)


@pytest.fixture(autouse=True)
def _reset_messaging_singletons():
    set_channel_type_registry(None)
    get_message_service.cache_clear()
    yield
    set_channel_type_registry(None)
    get_message_service.cache_clear()


@pytest.fixture
def transports():
    return {name: FakeTransport(name) for name in ("email", "slack", "sms")}


@pytest.fixture
def channel_types(transports):
    return {name: FakeChannelType(name, transport) for name, transport in transports.items()}


@pytest.fixture
def registry(channel_types):
    registry = ChannelTypeRegistry()
    for definition in channel_types.values():
        registry.register(definition)
    return registry


@pytest.fixture
def channel_repository():
    return InMemoryChannelRepository()


@pytest.fixture
def template_repository():
    return InMemoryTemplateRepository()


@pytest.fixture
def message_repository():
    return InMemoryMessageRepository()


@pytest.fixture
def make_channel(channel_repository):
    """Build and store a channel with a unique name."""
    counter = itertools.count(1)

    def _make(save: bool = True, **overrides):
        index = next(counter)
        overrides.setdefault("id", f"c{index}")
        overrides.setdefault("name", f"channel-{index}")
        channel = build_channel(**overrides)
        if save:
            channel_repository.save(channel)
        return channel

    return _make


@pytest.fixture
def make_template(template_repository):
    counter = itertools.count(1)

    def _make(save: bool = True, **overrides):
        index = next(counter)
        overrides.setdefault("id", f"t{index}")
        overrides.setdefault("name", f"template-{index}")
        template = build_template(**overrides)
        if save:
            template_repository.save(template)
        return template

    return _make


@pytest.fixture
def make_dispatcher(channel_repository, template_repository, message_repository, registry):
    created = []

    def _make(**kwargs) -> MessageDispatcher:
        options = {
            "channel_repository": channel_repository,
            "template_repository": template_repository,
            "message_repository": message_repository,
            "registry": registry,
            "max_workers": 4,
            "poll_interval": 0.005,
        }
        options.update(kwargs)
        dispatcher = MessageDispatcher(**options)
        created.append(dispatcher)
        return dispatcher

    yield _make
    for dispatcher in created:
        dispatcher.shutdown()


@pytest.fixture
def dispatcher(make_dispatcher):
    return make_dispatcher()
