"""Transport interface shared by all channel types."""

import threading
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Set, Tuple, Type

from infrastructure.operations import OperationContext, OperationResult
from modules.messaging.domain.models import Channel, Recipient
from modules.messaging.rendering import RenderedContent
from modules.messaging.transports.configs import ChannelConfig, validate_config_model


class Transport(ABC):
    """Delivers rendered content to the recipients of one channel.

    Transports make exactly one delivery attempt per call and never raise for
    provider failures: the outcome is an OperationResult whose status tells
    the caller whether the failure is transient. Retrying is the caller's
    decision.

    A transport instance serves a single dispatch. Transports that deliver
    per recipient record each delivery, and a retry through the same instance
    only sends to the recipients still pending.

    Attributes:
        config_model: typed configuration model for the channel type
        timeout: upper bound in seconds for a single send
    """

    config_model: Type[ChannelConfig]

    def __init__(self, timeout: float):
        if timeout <= 0:
            raise ValueError("timeout must be greater than 0")
        self.timeout = timeout
        self._delivered: Set[Tuple[str, str, str]] = set()
        self._delivered_lock = threading.Lock()

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Channel type this transport serves."""

    @abstractmethod
    def send(
        self, ctx: OperationContext, channel: Channel, content: RenderedContent
    ) -> OperationResult:
        """Deliver ``content`` to ``channel.recipients``."""

    def validate_config(self, config: Optional[Mapping[str, Any]]) -> OperationResult:
        return validate_config_model(self.config_model, config)

    def _effective_timeout(self, ctx: OperationContext) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.timeout
        return min(self.timeout, remaining)

    def _interrupted(self, ctx: OperationContext) -> Optional[OperationResult]:
        """Result to return when the caller gave up, ``None`` to keep going."""
        if ctx.cancelled:
            return OperationResult.cancelled(f"{self.type_name} send cancelled")
        if ctx.expired:
            return OperationResult.timeout(f"{self.type_name} send deadline exceeded")
        return None

    @staticmethod
    def _delivery_key(channel: Channel, recipient: Recipient) -> Tuple[str, str, str]:
        return channel.id, recipient.type.lower(), recipient.target

    def pending_recipients(self, channel: Channel) -> List[Recipient]:
        """Recipients of ``channel`` this transport has not delivered to yet."""
        with self._delivered_lock:
            return [
                recipient
                for recipient in channel.recipients
                if self._delivery_key(channel, recipient) not in self._delivered
            ]

    def _record_delivery(self, channel: Channel, recipient: Recipient) -> None:
        with self._delivered_lock:
            self._delivered.add(self._delivery_key(channel, recipient))
