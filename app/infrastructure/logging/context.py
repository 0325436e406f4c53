"""Request context binding for structured logging.

Binds operation-scoped context (correlation id, initiator, operation name)
to every log entry emitted while a notification operation runs.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(operation="notify_all_users", user_id="admin-1"):
        logger.info("bulk_run_started")
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    operation: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind context to all logs within the context manager.

    Args:
        correlation_id: Unique identifier for the run. Generated if not provided.
        user_id: Initiator of the operation (if known).
        operation: Name of the operation being performed.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id bound for the block.
    """
    context: dict[str, Any] = {}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    if user_id is not None:
        context["user_id"] = user_id

    if operation is not None:
        context["operation"] = operation

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")
