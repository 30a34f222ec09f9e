from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import get_settings
from modules.messaging.core.service import MessageService
from modules.messaging.providers import get_message_service
from modules.messaging.repositories.seed import load_seed_file

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _seed_repositories(
    service: MessageService, settings: "Settings", logger: BoundLogger
) -> None:
    seed_file = settings.server.SEED_FILE
    if not seed_file:
        logger.info("seed_data_skipped", reason="no_seed_file")
        return
    try:
        load_seed_file(seed_file, service.channels, service.templates)
    except Exception as exc:
        logger.error("seed_data_load_failed", path=seed_file, error=str(exc))
        raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    service = get_message_service()
    # No channel types can be added once requests are being served.
    service.registry.freeze()
    logger.info(
        "channel_types_frozen",
        count=service.registry.count(),
        types=service.registry.list_names(),
    )
    _seed_repositories(service, settings, logger)
    app.state.message_service = service

    yield

    logger.info("application_shutdown")
    service.shutdown()
    get_message_service.cache_clear()
