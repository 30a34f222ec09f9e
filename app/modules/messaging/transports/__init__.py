"""Transports deliver rendered content for one channel type each."""

from modules.messaging.transports.base import Transport
from modules.messaging.transports.chat import SlackWebhookTransport
from modules.messaging.transports.configs import (
    ChannelConfig,
    EmailConfig,
    SlackConfig,
    SmsConfig,
    validate_config_model,
)
from modules.messaging.transports.email import SMTPTransport
from modules.messaging.transports.sms import TwilioSMSTransport

__all__ = [
    "ChannelConfig",
    "EmailConfig",
    "SMTPTransport",
    "SlackConfig",
    "SlackWebhookTransport",
    "SmsConfig",
    "Transport",
    "TwilioSMSTransport",
    "validate_config_model",
]
