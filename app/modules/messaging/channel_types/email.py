"""Built-in ``email`` channel type."""

from typing import Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from modules.messaging.channel_types.base import ChannelTypeDefinition
from modules.messaging.transports import EmailConfig, SMTPTransport

_email_adapter = TypeAdapter(EmailStr)


class EmailChannelType(ChannelTypeDefinition):
    name = "email"
    display_name = "Email"
    description = "Send messages by e-mail through an SMTP server"
    config_model = EmailConfig
    recipient_types = frozenset({"to", "cc", "bcc"})

    def __init__(self, local_hostname: Optional[str] = None):
        self._local_hostname = local_hostname

    def validate_target(self, target: str) -> Optional[str]:
        try:
            _email_adapter.validate_python(target)
        except ValidationError:
            return "must be a valid e-mail address"
        return None

    def create_transport(self, timeout: float) -> SMTPTransport:
        return SMTPTransport(timeout, local_hostname=self._local_hostname)
