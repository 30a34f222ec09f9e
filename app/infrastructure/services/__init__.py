"""
Dependency injection services.

Provides provider functions for FastAPI dependency injection.
"""

from infrastructure.services.providers import get_settings

__all__ = ["get_settings"]
