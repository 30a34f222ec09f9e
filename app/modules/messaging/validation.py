"""Channel validation.

``validate_for_send`` guards the dispatch pipeline; ``validate_for_creation``
and ``validate_for_update`` guard the paths that store channels. Every check
returns an OperationResult: failures carry the error code in ``error_code``
and ``{"field", "message"}`` in ``data``.
"""

from typing import Optional

from infrastructure.operations import OperationResult
from modules.messaging.channel_types import ChannelTypeRegistry
from modules.messaging.domain.errors import TemplateNotFoundError
from modules.messaging.domain.models import Channel
from modules.messaging.domain.types import ErrorCode, ValidationErrorKind
from modules.messaging.repositories import ChannelRepository, TemplateRepository


def validation_error(code: str, field: str, message: str) -> OperationResult:
    return OperationResult.permanent_error(
        message, error_code=code, data={"field": field, "message": message}
    )


class ChannelValidator:
    """Domain checks a channel must pass before it is stored or used."""

    def __init__(
        self,
        registry: ChannelTypeRegistry,
        channel_repository: Optional[ChannelRepository] = None,
        template_repository: Optional[TemplateRepository] = None,
    ):
        self._registry = registry
        self._channels = channel_repository
        self._templates = template_repository

    def validate_for_send(self, channel: Channel) -> OperationResult:
        """Check, in order: deleted, disabled, recipients, type, config."""
        if channel.is_deleted:
            return validation_error(
                ErrorCode.CHANNEL_DELETED.value, "deleted_at", "channel is deleted"
            )
        if not channel.enabled:
            return validation_error(
                ErrorCode.CHANNEL_DISABLED.value, "enabled", "channel is disabled"
            )
        if not channel.recipients:
            return validation_error(
                ErrorCode.NO_RECIPIENTS.value, "recipients", "channel has no recipients"
            )
        return self._validate_type_and_config(channel)

    def validate_for_creation(self, channel: Channel) -> OperationResult:
        if self._channels is not None and self._channels.exists_by_name(channel.name):
            return validation_error(
                ValidationErrorKind.NAME_TAKEN.value,
                "name",
                f"channel name {channel.name} already in use",
            )
        return self._validate_definition(channel)

    def validate_for_update(self, channel: Channel) -> OperationResult:
        if self._channels is not None and self._channels.exists_by_name(
            channel.name, exclude_id=channel.id
        ):
            return validation_error(
                ValidationErrorKind.NAME_TAKEN.value,
                "name",
                f"channel name {channel.name} already in use",
            )
        return self._validate_definition(channel)

    def _validate_definition(self, channel: Channel) -> OperationResult:
        result = self._validate_type_and_config(channel)
        if not result.is_success:
            return result
        return self._validate_template(channel)

    def _validate_type_and_config(self, channel: Channel) -> OperationResult:
        if not self._registry.is_valid(channel.channel_type):
            return validation_error(
                ErrorCode.UNKNOWN_CHANNEL_TYPE.value,
                "channel_type",
                f"unknown channel type: {channel.channel_type}",
            )
        definition = self._registry.get(channel.channel_type)

        for check in (
            definition.validate_config(channel.config),
            definition.validate_recipients(channel.recipients),
        ):
            if not check.is_success:
                details = check.data or {}
                return validation_error(
                    ErrorCode.INVALID_CONFIG.value,
                    details.get("field", "config"),
                    details.get("message", check.message),
                )
        return OperationResult.success(message="channel is valid")

    def _validate_template(self, channel: Channel) -> OperationResult:
        if channel.template_id is None or self._templates is None:
            return OperationResult.success(message="channel is valid")
        try:
            template = self._templates.find_by_id(channel.template_id)
        except TemplateNotFoundError:
            return validation_error(
                ErrorCode.TEMPLATE_NOT_FOUND.value,
                "template_id",
                f"template not found: {channel.template_id}",
            )
        if template.channel_type != channel.channel_type:
            return validation_error(
                ErrorCode.TYPE_MISMATCH.value,
                "template_id",
                f"Template type: {template.channel_type}, Channel type: {channel.channel_type}",
            )
        return OperationResult.success(message="channel is valid")
