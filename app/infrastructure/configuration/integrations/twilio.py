"""Twilio integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class TwilioSettings(IntegrationSettings):
    """Twilio REST API configuration.

    Credentials are per channel; only the endpoint is process-wide.

    Environment Variables:
        TWILIO_API_URL: Twilio REST API base URL

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_url = settings.twilio.TWILIO_API_URL
        ```
    """

    TWILIO_API_URL: str = Field(default="https://api.twilio.com", alias="TWILIO_API_URL")
