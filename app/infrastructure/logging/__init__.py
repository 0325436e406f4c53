"""Structured logging infrastructure.

Centralized logging configuration and utilities using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_request_context(): Context manager for operation-scoped logging
    - get_correlation_id(): Get current correlation ID from context

Example:
    from infrastructure.logging import configure_logging, get_module_logger

    # At application startup
    configure_logging()

    # In a module
    logger = get_module_logger()
    logger.info("module_initialized")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_request_context,
    get_correlation_id,
)
from infrastructure.logging.formatters import (
    mask_sensitive_data,
    truncate_large_values,
    SENSITIVE_PATTERNS,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_request_context",
    "get_correlation_id",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
