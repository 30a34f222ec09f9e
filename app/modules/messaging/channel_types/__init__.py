"""Channel types: definitions, built-ins and the process-wide registry."""

from modules.messaging.channel_types.base import ChannelTypeDefinition
from modules.messaging.channel_types.email import EmailChannelType
from modules.messaging.channel_types.registry import (
    ChannelTypeRegistry,
    default_channel_types,
    get_channel_type_registry,
    register_default_channel_types,
    set_channel_type_registry,
)
from modules.messaging.channel_types.slack import SlackChannelType
from modules.messaging.channel_types.sms import SmsChannelType

__all__ = [
    "ChannelTypeDefinition",
    "ChannelTypeRegistry",
    "EmailChannelType",
    "SlackChannelType",
    "SmsChannelType",
    "default_channel_types",
    "get_channel_type_registry",
    "register_default_channel_types",
    "set_channel_type_registry",
]
