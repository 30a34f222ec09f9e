"""Load channels and templates from a JSON seed file.

Expected shape::

    {
        "templates": [{"id": "tpl_welcome", "name": "welcome", "channel_type": "email", ...}],
        "channels": [{"id": "channel_ops", "name": "ops-email", "channel_type": "email", ...}]
    }

Templates are loaded first so channels can reference them.
"""

import json
from pathlib import Path
from typing import Dict, Union

from infrastructure.logging import get_module_logger
from modules.messaging.domain.models import Channel, Template
from modules.messaging.repositories.base import ChannelRepository, TemplateRepository

logger = get_module_logger()


def load_seed_data(
    data: Dict,
    channel_repository: ChannelRepository,
    template_repository: TemplateRepository,
) -> Dict[str, int]:
    """Validate and save every template and channel in ``data``.

    Raises:
        pydantic.ValidationError: for an invalid entry.
        DuplicateEntityError: for a duplicate id or live name.
    """
    templates = [Template.model_validate(item) for item in data.get("templates", [])]
    channels = [Channel.model_validate(item) for item in data.get("channels", [])]

    for template in templates:
        template_repository.save(template)
    for channel in channels:
        channel_repository.save(channel)

    counts = {"templates": len(templates), "channels": len(channels)}
    logger.info("seed_data_loaded", **counts)
    return counts


def load_seed_file(
    path: Union[str, Path],
    channel_repository: ChannelRepository,
    template_repository: TemplateRepository,
) -> Dict[str, int]:
    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    return load_seed_data(data, channel_repository, template_repository)
