"""Test data factories for deterministic test data generation."""

from tests.factories.messaging import (
    FakeChannelType,
    FakeTransport,
    make_channel,
    make_email_config,
    make_recipient,
    make_slack_config,
    make_sms_config,
    make_template,
)

__all__ = [
    "FakeChannelType",
    "FakeTransport",
    "make_channel",
    "make_email_config",
    "make_recipient",
    "make_slack_config",
    "make_sms_config",
    "make_template",
]
