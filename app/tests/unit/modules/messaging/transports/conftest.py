"""Fixtures for transport tests."""

import pytest

from infrastructure.operations import OperationContext
from modules.messaging.rendering import RenderedContent


@pytest.fixture
def ctx():
    return OperationContext.with_timeout(30.0)


@pytest.fixture
def content():
    return RenderedContent(subject="Disk alert", body="Disk usage is at 91%")
