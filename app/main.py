import uvicorn
from dotenv import load_dotenv

from infrastructure.services import get_settings
from server import server

load_dotenv()

server_app = server.handler


def main():
    """Run the HTTP server."""
    settings = get_settings()
    uvicorn.run(
        server_app,
        host=settings.server.HOST,
        port=settings.server.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
