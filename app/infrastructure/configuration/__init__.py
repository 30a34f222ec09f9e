"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the channel
dispatch service using Pydantic BaseSettings with domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    MessagingFeatureSettings: Dispatch engine settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    default_body = settings.messaging.default_body
    seed_file = settings.server.SEED_FILE
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features.messaging import MessagingFeatureSettings

__all__ = ["Settings", "MessagingFeatureSettings"]
