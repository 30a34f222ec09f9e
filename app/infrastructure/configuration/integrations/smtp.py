"""SMTP integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SmtpSettings(IntegrationSettings):
    """Process-wide SMTP client configuration.

    Environment Variables:
        SMTP_LOCAL_HOSTNAME: FQDN announced in EHLO (default: the local hostname)
    """

    SMTP_LOCAL_HOSTNAME: str | None = Field(default=None, alias="SMTP_LOCAL_HOSTNAME")
