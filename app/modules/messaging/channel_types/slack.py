"""Built-in ``slack`` channel type."""

import re
from typing import Optional

from modules.messaging.channel_types.base import ChannelTypeDefinition
from modules.messaging.transports import SlackConfig, SlackWebhookTransport

SLACK_TARGET_PATTERN = re.compile(r"^[#@]?[A-Za-z0-9._-]+$")


class SlackChannelType(ChannelTypeDefinition):
    name = "slack"
    display_name = "Slack"
    description = "Post messages to Slack through an incoming webhook"
    config_model = SlackConfig
    recipient_types = frozenset({"channel", "user", "webhook"})

    def validate_target(self, target: str) -> Optional[str]:
        if not SLACK_TARGET_PATTERN.match(target):
            return "must be a channel (#name), a user (@name) or a Slack id"
        return None

    def create_transport(self, timeout: float) -> SlackWebhookTransport:
        return SlackWebhookTransport(timeout)
