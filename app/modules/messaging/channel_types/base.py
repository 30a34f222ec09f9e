"""Channel type definitions.

A channel type bundles human metadata, a typed configuration model, the
rules recipients must follow and a factory for the transport that delivers
to channels of that type.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Type

from infrastructure.operations import OperationResult
from modules.messaging.domain.models import Recipient
from modules.messaging.transports import ChannelConfig, Transport, validate_config_model


class ChannelTypeDefinition(ABC):
    """Capability bundle registered under ``name`` in the channel type registry.

    Subclasses set the class attributes and implement ``create_transport`` and
    ``validate_target``.
    """

    name: str
    display_name: str
    description: str
    config_model: Type[ChannelConfig]
    recipient_types: FrozenSet[str] = frozenset()

    def validate_config(self, config: Optional[Mapping[str, Any]]) -> OperationResult:
        """Validate a channel config; the success payload is the typed config."""
        return validate_config_model(self.config_model, config)

    def config_schema(self) -> Dict[str, Any]:
        """JSON schema of the configuration, for documentation only."""
        return self.config_model.model_json_schema()

    def validate_recipients(self, recipients: List[Recipient]) -> OperationResult:
        """Check every recipient's type and target against this channel type."""
        for index, recipient in enumerate(recipients):
            if self.recipient_types and recipient.type.lower() not in self.recipient_types:
                allowed = ", ".join(sorted(self.recipient_types))
                return self._recipient_error(
                    f"recipients[{index}].type",
                    f"must be one of: {allowed}",
                )
            problem = self.validate_target(recipient.target)
            if problem:
                return self._recipient_error(f"recipients[{index}].target", problem)
        return OperationResult.success()

    @abstractmethod
    def validate_target(self, target: str) -> Optional[str]:
        """Return a problem description for an invalid target, ``None`` if valid."""

    @abstractmethod
    def create_transport(self, timeout: float) -> Transport:
        """Build a transport whose sends are bounded by ``timeout`` seconds."""

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "recipient_types": sorted(self.recipient_types),
            "config_schema": self.config_schema(),
        }

    @staticmethod
    def _recipient_error(field: str, message: str) -> OperationResult:
        return OperationResult.permanent_error(
            f"{field}: {message}",
            error_code="INVALID_CONFIG",
            data={"field": field, "message": message},
        )
