"""Message service for dependency injection.

Provides a class-based interface to the dispatch engine for easier DI and testing.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from infrastructure.operations import OperationContext
from modules.messaging.channel_types import (
    ChannelTypeRegistry,
    get_channel_type_registry,
    register_default_channel_types,
)
from modules.messaging.core.dispatcher import MessageDispatcher
from modules.messaging.domain.models import ChannelOverride, Message
from modules.messaging.repositories import (
    ChannelRepository,
    InMemoryChannelRepository,
    InMemoryMessageRepository,
    InMemoryTemplateRepository,
    MessageRepository,
    TemplateRepository,
)
from modules.messaging.validation import ChannelValidator

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 1000


class MessageService:
    """Class-based message service.

    Wraps the MessageDispatcher with a service interface and owns the
    composition of repositories, registry and worker pool. This is a thin
    facade; dispatch itself is delegated to the dispatcher.

    Usage:
        # Via dependency injection
        from modules.messaging.api.dependencies import MessageServiceDep

        @router.post("/messages")
        def send(service: MessageServiceDep, request: SendMessageRequest):
            return service.send_message(request.channel_ids, request.variables)

        # Direct instantiation
        from infrastructure.services import get_settings

        service = MessageService(get_settings())
        message = service.send_message(["channel_ops"], {"service": "api"})
    """

    def __init__(
        self,
        settings: "Settings",
        channel_repository: Optional[ChannelRepository] = None,
        template_repository: Optional[TemplateRepository] = None,
        message_repository: Optional[MessageRepository] = None,
        registry: Optional[ChannelTypeRegistry] = None,
        dispatcher: Optional[MessageDispatcher] = None,
    ):
        """Initialize message service.

        Args:
            settings: Settings instance (required, passed from provider).
            channel_repository: Defaults to an in-memory repository.
            template_repository: Defaults to an in-memory repository.
            message_repository: Defaults to an in-memory repository.
            registry: Defaults to the global registry with built-in types registered.
            dispatcher: Optional pre-configured dispatcher.
        """
        self._settings = settings
        self.channels = channel_repository or InMemoryChannelRepository()
        self.templates = template_repository or InMemoryTemplateRepository()
        self.messages = message_repository or InMemoryMessageRepository()
        self.registry = registry or register_default_channel_types(
            get_channel_type_registry(), settings
        )
        self.validator = ChannelValidator(self.registry, self.channels, self.templates)

        if dispatcher is None:
            messaging = settings.messaging
            dispatcher = MessageDispatcher(
                channel_repository=self.channels,
                template_repository=self.templates,
                message_repository=self.messages,
                registry=self.registry,
                validator=self.validator,
                max_workers=messaging.max_workers,
                default_body=messaging.default_body,
                retry_enabled=messaging.retry_enabled,
                poll_interval=messaging.poll_interval_ms / 1000.0,
            )
            self._owns_dispatcher = True
        else:
            self._owns_dispatcher = False
        self._dispatcher = dispatcher

    def send_message(
        self,
        channel_ids: List[str],
        variables: Optional[Dict[str, Any]] = None,
        overrides: Optional[Dict[str, ChannelOverride]] = None,
        ctx: Optional[OperationContext] = None,
        timeout_ms: Optional[int] = None,
    ) -> Message:
        """Dispatch a message, bounding it by ``timeout_ms`` or the configured default."""
        if ctx is None:
            timeout_ms = timeout_ms or self._settings.messaging.request_timeout_ms
            ctx = OperationContext.with_timeout(timeout_ms / 1000.0)
        return self._dispatcher.send_message(ctx, channel_ids, variables, overrides)

    def get_message(self, message_id: str) -> Message:
        """Raises MessageNotFoundError for an unknown id."""
        return self.messages.find_by_id(message_id)

    def list_messages(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Message]:
        """Most recent messages first."""
        return self.messages.list_recent(limit)

    def list_channel_types(self) -> List[Dict[str, Any]]:
        return self.registry.describe()

    def shutdown(self) -> None:
        if self._owns_dispatcher:
            self._dispatcher.shutdown()
