"""Message dispatch engine.

``MessageDispatcher.send_message`` fans one logical message out to a list of
channels. Each channel runs through the same pipeline:

    resolve channel → validate → resolve template → build content
    → check variables → render → create transport → send (with retries)
    → mark channel as used

Every step that fails produces a failed MessageResult for that channel; the
other channels are unaffected. Only ``InvalidRequestError`` (nothing to send)
and ``PersistenceError`` (the aggregate could not be stored) leave the
engine.

Transports run on a worker pool so the engine can stop waiting for them when
the request is cancelled or the per-send deadline passes. The transport
receives a child context that is cancelled at that point and is expected to
stop at its next check.
"""

from concurrent.futures import Executor, ThreadPoolExecutor, wait
from typing import Any, Dict, Iterable, Optional

from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.operations import OperationContext, OperationResult, OperationStatus
from infrastructure.resilience import RetryConfig, execute_with_retry
from modules.messaging.channel_types import ChannelTypeRegistry
from modules.messaging.domain.errors import (
    ChannelNotFoundError,
    ChannelTypeNotFoundError,
    PersistenceError,
    TemplateNotFoundError,
)
from modules.messaging.domain.models import (
    Channel,
    ChannelOverride,
    CommonSettings,
    Message,
    MessageResult,
    Template,
    now_ms,
)
from modules.messaging.domain.types import ErrorCode
from modules.messaging.rendering import (
    RenderedContent,
    RenderRequest,
    TemplateRenderer,
    extract_variables,
    find_missing_variables,
)
from modules.messaging.repositories import (
    ChannelRepository,
    MessageRepository,
    TemplateRepository,
)
from modules.messaging.transports import Transport
from modules.messaging.validation import ChannelValidator

logger = get_module_logger()

DEFAULT_BODY = "Default message content"


class _ChannelFailure(Exception):
    """Short-circuits the per-channel pipeline with a failed result."""

    def __init__(self, code: ErrorCode, message: str, details: str = ""):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


def _validation_details(result: OperationResult) -> str:
    """``field: message`` for validator failures that name the offending field."""
    data = result.data if isinstance(result.data, dict) else {}
    if data.get("field"):
        return f"{data['field']}: {data.get('message', result.message)}"
    return result.message


class MessageDispatcher:
    """Runs SendMessage requests against injected repositories and registry.

    Args:
        channel_repository: Channel lookups and ``last_used`` updates
        template_repository: Template lookups
        message_repository: Persistence of the message aggregate
        registry: Channel type registry providing transports
        validator: Send-time channel validator (built from ``registry`` if omitted)
        renderer: Template renderer
        executor: Worker pool running transports (created and owned if omitted)
        max_workers: Size of the pool created when ``executor`` is omitted
        default_body: Body used when neither template nor override supplies one
        retry_enabled: Honour channel retry settings for transient errors
        poll_interval: Seconds between cancellation checks while a transport runs
    """

    def __init__(
        self,
        channel_repository: ChannelRepository,
        template_repository: TemplateRepository,
        message_repository: MessageRepository,
        registry: ChannelTypeRegistry,
        validator: Optional[ChannelValidator] = None,
        renderer: Optional[TemplateRenderer] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 8,
        default_body: str = DEFAULT_BODY,
        retry_enabled: bool = True,
        poll_interval: float = 0.05,
    ):
        self._channels = channel_repository
        self._templates = template_repository
        self._messages = message_repository
        self._registry = registry
        self._validator = validator or ChannelValidator(registry)
        self._renderer = renderer or TemplateRenderer()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="transport"
        )
        self._default_body = default_body
        self._retry_enabled = retry_enabled
        self._poll_interval = poll_interval

    def send_message(
        self,
        ctx: Optional[OperationContext],
        channel_ids: Iterable[str],
        variables: Optional[Dict[str, Any]] = None,
        overrides: Optional[Dict[str, ChannelOverride]] = None,
    ) -> Message:
        """Dispatch one message to every distinct channel in ``channel_ids``.

        Returns:
            The persisted message. Inspect ``status`` and ``results``: a
            returned message may contain failures, and is left ``pending`` when
            the request was cancelled between channels.

        Raises:
            InvalidRequestError: if ``channel_ids`` is empty after deduplication.
            PersistenceError: if the initial save or the final update fails.
        """
        ctx = ctx or OperationContext.background()
        message = Message.create(channel_ids, variables, overrides)

        with bind_request_context(message_id=message.id):
            logger.info(
                "message_dispatch_started",
                channel_count=len(message.channel_ids),
                override_count=len(message.channel_overrides),
            )

            try:
                self._messages.save(message)
            except Exception as exc:
                logger.error("message_save_failed", error=str(exc))
                raise PersistenceError(f"failed to save message: {exc}") from exc

            for channel_id in message.channel_ids:
                if ctx.done:
                    logger.warning(
                        "message_dispatch_interrupted",
                        reason="cancelled" if ctx.cancelled else "deadline_exceeded",
                        remaining_channels=len(message.channel_ids) - len(message.results),
                    )
                    break
                message.add_result(self._dispatch_channel(ctx, message, channel_id))

            try:
                self._messages.update(message)
            except Exception as exc:
                logger.error("message_update_failed", error=str(exc))
                raise PersistenceError(
                    f"failed to update message: {exc}", aggregate=message
                ) from exc

            logger.info(
                "message_dispatch_completed",
                status=message.status.value,
                succeeded=len(message.successful_results()),
                failed=len(message.failed_results()),
            )
        return message

    def shutdown(self) -> None:
        """Release the worker pool if the dispatcher created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _dispatch_channel(
        self, ctx: OperationContext, message: Message, channel_id: str
    ) -> MessageResult:
        try:
            result = self._run_pipeline(ctx, message, channel_id)
        except _ChannelFailure as failure:
            logger.warning(
                "channel_dispatch_failed",
                channel_id=channel_id,
                error_code=failure.code.value,
                details=failure.details,
            )
            return MessageResult.failure(
                channel_id, failure.code, failure.message, failure.details
            )
        except Exception as exc:
            logger.error(
                "channel_dispatch_crashed",
                channel_id=channel_id,
                error=str(exc),
                exc_info=True,
            )
            return MessageResult.failure(
                channel_id, ErrorCode.SEND_ERROR, "Message sending failed", str(exc)
            )
        logger.info("channel_dispatch_succeeded", channel_id=channel_id)
        return result

    def _run_pipeline(
        self, ctx: OperationContext, message: Message, channel_id: str
    ) -> MessageResult:
        override = message.override_for(channel_id)

        channel = self._load_channel(channel_id)
        self._validate(channel, override)
        template = self._load_template(channel)

        request = self._build_render_request(template, override, message.variables)
        if template is not None:
            self._check_variables(request)
        content = self._render(request)

        settings = self._effective_settings(channel, override)
        transport = self._create_transport(channel, settings)

        target = channel
        if override is not None and override.recipients is not None:
            target = channel.with_recipients(override.recipients)

        outcome = self._send_with_retry(ctx, transport, target, content, settings)
        if outcome.status == OperationStatus.CANCELLED:
            raise _ChannelFailure(
                ErrorCode.CANCELLED, "Message sending cancelled", outcome.message
            )
        if outcome.status == OperationStatus.TIMEOUT:
            raise _ChannelFailure(
                ErrorCode.TIMEOUT, "Message sending timed out", outcome.message
            )
        if not outcome.is_success:
            raise _ChannelFailure(
                ErrorCode.SEND_ERROR, "Message sending failed", outcome.message
            )

        sent_at = now_ms()
        self._mark_as_used(channel_id, sent_at)
        return MessageResult.success(channel_id, sent_at=sent_at)

    def _load_channel(self, channel_id: str) -> Channel:
        try:
            channel = self._channels.find_by_id(channel_id)
        except ChannelNotFoundError as exc:
            raise _ChannelFailure(
                ErrorCode.CHANNEL_NOT_FOUND, "Failed to retrieve channel", str(exc)
            ) from exc
        except Exception as exc:
            logger.error("channel_lookup_failed", channel_id=channel_id, error=str(exc))
            raise _ChannelFailure(
                ErrorCode.CHANNEL_NOT_FOUND, "Failed to retrieve channel", str(exc)
            ) from exc
        if channel.is_deleted:
            raise _ChannelFailure(
                ErrorCode.CHANNEL_NOT_FOUND,
                "Failed to retrieve channel",
                f"channel not found: {channel_id}",
            )
        return channel

    def _validate(self, channel: Channel, override: Optional[ChannelOverride]) -> None:
        result = self._validator.validate_for_send(channel)
        if not result.is_success:
            raise _ChannelFailure(
                ErrorCode(result.error_code),
                "Channel validation failed",
                _validation_details(result),
            )
        if override is not None and override.recipients is not None:
            if not override.recipients:
                raise _ChannelFailure(
                    ErrorCode.NO_RECIPIENTS,
                    "Channel validation failed",
                    "override recipients are empty",
                )
            definition = self._registry.get(channel.channel_type)
            checked = definition.validate_recipients(override.recipients)
            if not checked.is_success:
                raise _ChannelFailure(
                    ErrorCode.INVALID_CONFIG,
                    "Channel validation failed",
                    _validation_details(checked),
                )

    def _load_template(self, channel: Channel) -> Optional[Template]:
        if channel.template_id is None:
            return None
        try:
            template = self._templates.find_by_id(channel.template_id)
        except TemplateNotFoundError as exc:
            raise _ChannelFailure(
                ErrorCode.TEMPLATE_NOT_FOUND, "Failed to retrieve template", str(exc)
            ) from exc
        except Exception as exc:
            logger.error(
                "template_lookup_failed",
                template_id=channel.template_id,
                error=str(exc),
            )
            raise _ChannelFailure(
                ErrorCode.TEMPLATE_NOT_FOUND, "Failed to retrieve template", str(exc)
            ) from exc

        if template.channel_type != channel.channel_type:
            raise _ChannelFailure(
                ErrorCode.TYPE_MISMATCH,
                "Template type does not match channel type",
                f"Template type: {template.channel_type}, Channel type: {channel.channel_type}",
            )
        return template

    def _build_render_request(
        self,
        template: Optional[Template],
        override: Optional[ChannelOverride],
        variables: Dict[str, Any],
    ) -> RenderRequest:
        if template is not None:
            subject, body = template.subject or "", template.body
        else:
            subject, body = "", self._default_body

        if override is not None:
            if override.subject is not None:
                subject = override.subject
            if override.body is not None:
                body = override.body
        return RenderRequest(subject=subject, body=body, variables=variables)

    def _check_variables(self, request: RenderRequest) -> None:
        missing = find_missing_variables(
            extract_variables(request.subject, request.body), request.variables
        )
        if missing:
            raise _ChannelFailure(
                ErrorCode.MISSING_VARIABLES,
                "Variable validation failed",
                f"missing required variables: [{' '.join(missing)}]",
            )

    def _render(self, request: RenderRequest) -> RenderedContent:
        try:
            return self._renderer.render(request)
        except Exception as exc:
            raise _ChannelFailure(
                ErrorCode.RENDER_ERROR, "Template rendering failed", str(exc)
            ) from exc

    @staticmethod
    def _effective_settings(
        channel: Channel, override: Optional[ChannelOverride]
    ) -> CommonSettings:
        if override is not None and override.common_settings is not None:
            return override.common_settings.apply_to(channel.common_settings)
        return channel.common_settings

    def _create_transport(self, channel: Channel, settings: CommonSettings) -> Transport:
        try:
            definition = self._registry.get(channel.channel_type)
        except ChannelTypeNotFoundError as exc:
            raise _ChannelFailure(
                ErrorCode.UNKNOWN_CHANNEL_TYPE, "Channel validation failed", str(exc)
            ) from exc
        return definition.create_transport(settings.timeout / 1000.0)

    def _send_with_retry(
        self,
        ctx: OperationContext,
        transport: Transport,
        channel: Channel,
        content: RenderedContent,
        settings: CommonSettings,
    ) -> OperationResult:
        retry = RetryConfig(
            retry_attempts=settings.retry_attempts if self._retry_enabled else 0,
            delay_ms=settings.retry_delay,
        )
        timeout = settings.timeout / 1000.0
        return execute_with_retry(
            lambda attempt: self._invoke_transport(
                ctx, transport, channel, content, timeout, attempt
            ),
            retry,
            ctx,
            operation_name=f"{transport.type_name}_send",
        )

    def _invoke_transport(
        self,
        ctx: OperationContext,
        transport: Transport,
        channel: Channel,
        content: RenderedContent,
        timeout: float,
        attempt: int,
    ) -> OperationResult:
        """Run one send on the worker pool, bounded by the request and ``timeout``."""
        if ctx.cancelled:
            return OperationResult.cancelled("cancelled before send")
        if ctx.expired:
            return OperationResult.timeout("request deadline exceeded before send")

        attempt_ctx = ctx.child(timeout)
        future = self._executor.submit(transport.send, attempt_ctx, channel, content)

        while True:
            done, _ = wait([future], timeout=self._poll_interval)
            if done:
                break
            if attempt_ctx.done:
                attempt_ctx.cancel()
                future.cancel()
                logger.warning(
                    "transport_abandoned",
                    channel_id=channel.id,
                    attempt=attempt,
                    reason="cancelled" if ctx.cancelled else "deadline_exceeded",
                )
                return self._interrupted_outcome(ctx, transport, timeout)

        try:
            outcome = future.result()
        except Exception as exc:
            logger.error(
                "transport_raised",
                channel_id=channel.id,
                attempt=attempt,
                error=str(exc),
                exc_info=True,
            )
            return OperationResult.permanent_error(str(exc), error_code="TRANSPORT_EXCEPTION")

        if not isinstance(outcome, OperationResult):
            return OperationResult.permanent_error(
                f"transport returned {type(outcome).__name__}",
                error_code="TRANSPORT_EXCEPTION",
            )
        if attempt_ctx.done:
            # The transport finished after noticing the abort.
            logger.warning(
                "transport_interrupted",
                channel_id=channel.id,
                attempt=attempt,
                reason="cancelled" if ctx.cancelled else "deadline_exceeded",
                transport_status=outcome.status.value,
            )
            return self._interrupted_outcome(ctx, transport, timeout)
        return outcome

    @staticmethod
    def _interrupted_outcome(
        ctx: OperationContext, transport: Transport, timeout: float
    ) -> OperationResult:
        if ctx.cancelled:
            return OperationResult.cancelled(f"{transport.type_name} send cancelled")
        return OperationResult.timeout(
            f"{transport.type_name} send exceeded deadline of {timeout:g}s"
        )

    def _mark_as_used(self, channel_id: str, at: int) -> None:
        try:
            self._channels.mark_used(channel_id, at)
        except Exception as exc:
            logger.warning("mark_as_used_failed", channel_id=channel_id, error=str(exc))
