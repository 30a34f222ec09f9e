"""Slack transport using incoming webhooks."""

import math
from typing import Any, Dict, Optional

import structlog
from slack_sdk.webhook import WebhookClient

from infrastructure.operations import (
    OperationContext,
    OperationResult,
    classify_http_status,
    classify_network_error,
)
from modules.messaging.domain.models import Channel, Recipient
from modules.messaging.rendering import RenderedContent
from modules.messaging.transports.base import Transport
from modules.messaging.transports.configs import SlackConfig

logger = structlog.get_logger()

TARGET_PREFIXES = {"channel": "#", "user": "@"}


def resolve_target(recipient: Recipient) -> Optional[str]:
    """Slack destination for a recipient.

    ``channel`` and ``user`` recipients map to ``#name`` and ``@name``; targets
    already carrying a prefix are used as-is. A ``webhook`` recipient posts to
    the webhook's default destination and yields ``None``.
    """
    kind = recipient.type.lower()
    if kind == "webhook":
        return None
    target = recipient.target
    if target.startswith(("#", "@")):
        return target
    prefix = TARGET_PREFIXES.get(kind, "#")
    return f"{prefix}{target}"


class SlackWebhookTransport(Transport):
    """Posts the rendered message to each recipient through the channel's webhook.

    The subject becomes the attachment title, the body the message text.
    """

    config_model = SlackConfig

    @property
    def type_name(self) -> str:
        return "slack"

    def send(
        self, ctx: OperationContext, channel: Channel, content: RenderedContent
    ) -> OperationResult:
        validation = self.validate_config(channel.config)
        if not validation.is_success:
            return validation
        config: SlackConfig = validation.data

        client = WebhookClient(
            config.webhook_url,
            timeout=max(1, math.ceil(self._effective_timeout(ctx))),
        )

        delivered = 0
        pending = self.pending_recipients(channel)
        skipped = len(channel.recipients) - len(pending)

        for recipient in pending:
            interrupted = self._interrupted(ctx)
            if interrupted:
                return interrupted

            payload = self.build_payload(config, recipient, content)
            try:
                response = client.send_dict(payload)
            except OSError as exc:
                result = classify_network_error(exc, provider="webhook")
            else:
                result = classify_http_status(
                    response.status_code,
                    response.body,
                    response.headers,
                    provider="webhook",
                )

            if not result.is_success:
                logger.warning(
                    "slack_webhook_failed",
                    channel_id=channel.id,
                    target=payload.get("channel"),
                    error_code=result.error_code,
                    error=result.message,
                )
                return result
            self._record_delivery(channel, recipient)
            delivered += 1

        logger.info(
            "slack_webhook_sent",
            channel_id=channel.id,
            recipients=delivered,
            already_delivered=skipped,
        )
        return OperationResult.success(
            message="Message posted to Slack", data={"recipients": delivered}
        )

    @staticmethod
    def build_payload(
        config: SlackConfig, recipient: Recipient, content: RenderedContent
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": content.body}
        if content.subject:
            payload["attachments"] = [
                {"title": content.subject, "fallback": content.subject}
            ]

        target = resolve_target(recipient) or config.channel
        if target:
            payload["channel"] = target
        if config.username:
            payload["username"] = config.username
        if config.icon_emoji:
            payload["icon_emoji"] = config.icon_emoji
        if config.icon_url:
            payload["icon_url"] = config.icon_url
        return payload
