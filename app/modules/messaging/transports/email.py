"""Email transport using SMTP."""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Dict, List, Optional

import structlog

from infrastructure.operations import (
    OperationContext,
    OperationResult,
    classify_smtp_error,
)
from modules.messaging.domain.models import Channel, Recipient
from modules.messaging.rendering import RenderedContent
from modules.messaging.transports.base import Transport
from modules.messaging.transports.configs import EmailConfig

logger = structlog.get_logger()

RECIPIENT_HEADERS = ("to", "cc", "bcc")


def route_recipients(recipients: List[Recipient]) -> Dict[str, List[str]]:
    """Group recipient addresses by header; unknown types go to ``To``."""
    routed: Dict[str, List[str]] = {header: [] for header in RECIPIENT_HEADERS}
    for recipient in recipients:
        header = recipient.type.lower()
        routed[header if header in routed else "to"].append(recipient.target)
    return routed


class SMTPTransport(Transport):
    """Sends one e-mail per message to all channel recipients.

    Recipients are routed to To, Cc or Bcc by their type. Bcc addresses
    receive the message but never appear in its headers.
    """

    config_model = EmailConfig

    def __init__(self, timeout: float, local_hostname: Optional[str] = None):
        super().__init__(timeout)
        self._local_hostname = local_hostname

    @property
    def type_name(self) -> str:
        return "email"

    def send(
        self, ctx: OperationContext, channel: Channel, content: RenderedContent
    ) -> OperationResult:
        validation = self.validate_config(channel.config)
        if not validation.is_success:
            return validation
        config: EmailConfig = validation.data

        routed = route_recipients(channel.recipients)
        envelope = routed["to"] + routed["cc"] + routed["bcc"]
        if not envelope:
            return OperationResult.permanent_error(
                "no email recipients", error_code="NO_RECIPIENTS"
            )

        message = self._build_message(config, routed, content)

        interrupted = self._interrupted(ctx)
        if interrupted:
            return interrupted

        try:
            with smtplib.SMTP(
                config.smtp_host,
                config.smtp_port,
                local_hostname=self._local_hostname,
                timeout=self._effective_timeout(ctx),
            ) as smtp:
                if config.use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                smtp.login(config.username, config.password)
                refused = smtp.send_message(
                    message, from_addr=str(config.from_email), to_addrs=envelope
                )
        except (smtplib.SMTPException, OSError) as exc:
            result = classify_smtp_error(exc)
            logger.warning(
                "smtp_send_failed",
                channel_id=channel.id,
                smtp_host=config.smtp_host,
                error_code=result.error_code,
                error=result.message,
            )
            return result

        if refused:
            logger.warning(
                "smtp_recipients_partially_refused",
                channel_id=channel.id,
                refused=sorted(refused),
            )

        logger.info(
            "smtp_sent",
            channel_id=channel.id,
            recipients=len(envelope),
            subject=content.subject,
        )
        return OperationResult.success(
            message="Email sent via SMTP",
            data={"recipients": len(envelope), "refused": sorted(refused)},
        )

    @staticmethod
    def _build_message(
        config: EmailConfig, routed: Dict[str, List[str]], content: RenderedContent
    ) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = content.subject
        message["From"] = formataddr((config.from_name or "", str(config.from_email)))
        if routed["to"]:
            message["To"] = ", ".join(routed["to"])
        if routed["cc"]:
            message["Cc"] = ", ".join(routed["cc"])
        message.set_content(content.body)
        return message
