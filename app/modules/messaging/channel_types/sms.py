"""Built-in ``sms`` channel type."""

from typing import Optional

import requests

from modules.messaging.channel_types.base import ChannelTypeDefinition
from modules.messaging.transports import SmsConfig, TwilioSMSTransport
from modules.messaging.transports.configs import E164_PATTERN
from modules.messaging.transports.sms import DEFAULT_API_URL


class SmsChannelType(ChannelTypeDefinition):
    """SMS channels; transports share one HTTP session for connection reuse."""

    name = "sms"
    display_name = "SMS"
    description = "Send text messages through Twilio"
    config_model = SmsConfig

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
    ):
        self._api_url = api_url
        self._session = session or requests.Session()

    def validate_target(self, target: str) -> Optional[str]:
        if not E164_PATTERN.match(target):
            return "must be a phone number in E.164 format"
        return None

    def create_transport(self, timeout: float) -> TwilioSMSTransport:
        return TwilioSMSTransport(timeout, api_url=self._api_url, session=self._session)
