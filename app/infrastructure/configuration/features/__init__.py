"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.messaging import MessagingFeatureSettings

__all__ = ["MessagingFeatureSettings"]
