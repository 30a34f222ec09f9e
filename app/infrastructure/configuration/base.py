"""Shared base classes for settings modules.

Every settings class reads the process environment and an optional ``.env``
file, is case sensitive, and ignores variables it does not declare.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Base class for transport provider settings (SMTP, Twilio)."""

    model_config = _ENV_CONFIG


class FeatureSettings(BaseSettings):
    """Base class for feature module settings such as the dispatch engine."""

    model_config = _ENV_CONFIG


class InfrastructureSettings(BaseSettings):
    """Base class for infrastructure-level settings.

    Infrastructure settings control how the process runs (bind address,
    seed data) rather than what a feature does.
    """

    model_config = _ENV_CONFIG
