"""Synchronous retry loop for operations returning OperationResult."""

from typing import Callable, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationContext, OperationResult
from infrastructure.resilience.retry.config import RetryConfig

logger = get_module_logger()


def execute_with_retry(
    operation: Callable[[int], OperationResult],
    config: RetryConfig,
    ctx: Optional[OperationContext] = None,
    operation_name: str = "operation",
) -> OperationResult:
    """Run ``operation`` until it succeeds, fails permanently or attempts run out.

    Only results whose ``is_transient`` is true are retried. The delay between
    attempts is interrupted when ``ctx`` is cancelled or its deadline passes,
    in which case a CANCELLED or TIMEOUT result is returned.

    Args:
        operation: Callable receiving the 1-based attempt number
        config: Fixed back-off policy
        ctx: Optional cancellation context
        operation_name: Label used in log events

    Returns:
        The last OperationResult produced by ``operation``.
    """
    ctx = ctx or OperationContext.background()
    attempt = 1
    while True:
        result = operation(attempt)
        if result.is_success or not result.is_transient:
            return result
        if attempt >= config.total_attempts:
            logger.warning(
                "retry_attempts_exhausted",
                operation=operation_name,
                attempts=attempt,
                error_code=result.error_code,
                error=result.message,
            )
            return result

        logger.info(
            "retrying_transient_error",
            operation=operation_name,
            attempt=attempt,
            delay_ms=config.delay_ms,
            error_code=result.error_code,
        )
        if ctx.wait(config.delay_seconds):
            if ctx.cancelled:
                return OperationResult.cancelled(
                    f"cancelled while waiting to retry {operation_name}"
                )
            return OperationResult.timeout(
                f"deadline exceeded while waiting to retry {operation_name}"
            )
        attempt += 1
