"""FastAPI dependency type aliases for the messaging module."""

from typing import Annotated

from fastapi import Depends

from modules.messaging.core.service import MessageService
from modules.messaging.providers import get_message_service

# Message dispatch service
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
