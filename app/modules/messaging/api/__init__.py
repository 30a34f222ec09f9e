"""HTTP surface of the messaging module."""

from modules.messaging.api.routes import router

__all__ = ["router"]
