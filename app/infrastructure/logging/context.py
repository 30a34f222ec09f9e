"""Request context binding for structured logging.

Binds request-scoped values (correlation id, message id) to structlog's
context variables so every log line emitted while a message is dispatched
can be tied back to that message.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(message_id=message.id):
        logger.info("message_dispatch_started")
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    message_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind request-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        message_id: Identifier of the message being dispatched.
        request_path: HTTP request path (e.g., "/api/v1/messages").
        request_method: HTTP method (e.g., "POST").
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars for the block.
    """
    context: dict[str, Any] = {
        "correlation_id": correlation_id or get_correlation_id() or str(uuid.uuid4())
    }

    if message_id is not None:
        context["message_id"] = message_id

    if request_path is not None:
        context["request_path"] = request_path

    if request_method is not None:
        context["request_method"] = request_method

    context.update(extra_context)

    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
        # nested blocks restore what the outer block bound
        restored = {key: previous[key] for key in context if key in previous}
        if restored:
            structlog.contextvars.bind_contextvars(**restored)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_request_context() -> None:
    """Clear all request-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
