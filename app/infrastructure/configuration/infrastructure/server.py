"""Server infrastructure settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        SERVER_HOST: Interface uvicorn binds to (default: 0.0.0.0)
        SERVER_PORT: Port uvicorn listens on (default: 8000)
        MESSAGING_SEED_FILE: Optional JSON file of channels and templates
            loaded into the in-memory repositories at start-up

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        port = settings.server.PORT
        seed_file = settings.server.SEED_FILE
        ```
    """

    HOST: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    PORT: int = Field(default=8000, alias="SERVER_PORT")
    SEED_FILE: Optional[str] = Field(default=None, alias="MESSAGING_SEED_FILE")
