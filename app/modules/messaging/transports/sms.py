"""SMS transport using the Twilio Messages API."""

from typing import Optional

import requests
import structlog

from infrastructure.operations import (
    OperationContext,
    OperationResult,
    classify_http_status,
    classify_requests_error,
)
from modules.messaging.domain.models import Channel
from modules.messaging.rendering import RenderedContent
from modules.messaging.transports.base import Transport
from modules.messaging.transports.configs import SmsConfig

logger = structlog.get_logger()

MAX_SMS_LENGTH = 1600
DEFAULT_API_URL = "https://api.twilio.com"


def format_sms_body(content: RenderedContent) -> str:
    """Prefix the body with the subject and cap it at Twilio's length limit."""
    text = f"{content.subject}: {content.body}" if content.subject else content.body
    if len(text) > MAX_SMS_LENGTH:
        text = text[: MAX_SMS_LENGTH - 3] + "..."
    return text


class TwilioSMSTransport(Transport):
    """Sends one SMS per recipient phone number."""

    config_model = SmsConfig

    def __init__(
        self,
        timeout: float,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(timeout)
        self._api_url = api_url.rstrip("/")
        self._session = session or requests.Session()

    @property
    def type_name(self) -> str:
        return "sms"

    def send(
        self, ctx: OperationContext, channel: Channel, content: RenderedContent
    ) -> OperationResult:
        validation = self.validate_config(channel.config)
        if not validation.is_success:
            return validation
        config: SmsConfig = validation.data

        url = f"{self._api_url}/2010-04-01/Accounts/{config.account_sid}/Messages.json"
        body = format_sms_body(content)
        sids = []
        pending = self.pending_recipients(channel)
        skipped = len(channel.recipients) - len(pending)

        for recipient in pending:
            interrupted = self._interrupted(ctx)
            if interrupted:
                return interrupted

            try:
                response = self._session.post(
                    url,
                    data={"To": recipient.target, "From": config.from_number, "Body": body},
                    auth=(config.account_sid, config.auth_token),
                    timeout=self._effective_timeout(ctx),
                )
            except requests.RequestException as exc:
                result = classify_requests_error(exc, provider="twilio")
            else:
                result = classify_http_status(
                    response.status_code, response.text, response.headers, "twilio"
                )
                if result.is_success:
                    sids.append(self._message_sid(response))
                    self._record_delivery(channel, recipient)

            if not result.is_success:
                logger.warning(
                    "sms_send_failed",
                    channel_id=channel.id,
                    error_code=result.error_code,
                    error=result.message,
                )
                return result

        logger.info(
            "sms_sent",
            channel_id=channel.id,
            recipients=len(sids),
            already_delivered=skipped,
        )
        return OperationResult.success(
            message="SMS sent via Twilio", data={"message_sids": sids}
        )

    @staticmethod
    def _message_sid(response: requests.Response) -> Optional[str]:
        try:
            return response.json().get("sid")
        except ValueError:
            return None
