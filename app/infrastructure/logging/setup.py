"""Structlog configuration and logger setup.

Configures structlog with callsite context, exception formatting and
environment-aware rendering (console in development, JSON in production).

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    # Configure logging at app startup
    configure_logging()

    # Get a logger for your module
    logger = get_module_logger()
    logger.info("event_name", key="value")
"""

import inspect
import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import (
    mask_sensitive_data,
    truncate_large_values,
)


def _is_test_environment() -> bool:
    """True if pytest is in sys.modules."""
    return "pytest" in sys.modules


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structured logging.

    Args:
        log_level: Optional override for log level (DEBUG, INFO, WARNING, etc).
            Defaults to settings.LOG_LEVEL if not provided.
        is_production: Optional override for production mode. Defaults to
            settings.is_production if not provided. Controls JSON vs console output.

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)

        # Minimal processors so calls don't fail; nothing is emitted because
        # the root logger level is above CRITICAL.
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            level=logging.CRITICAL + 1,
            force=True,
        )
        return structlog.stdlib.get_logger()

    if log_level is None or is_production is None:
        # Imported here: providers pull in the whole service graph.
        from infrastructure.services.providers import get_settings

        settings = get_settings()
        log_level = log_level or settings.LOG_LEVEL
        if is_production is None:
            is_production = settings.is_production

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if not is_production:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    return structlog.stdlib.get_logger()


def get_module_logger() -> BoundLogger:
    """Get a logger for the calling module with full path context.

    Binds `component` (last dotted segment) and `module_path`.

    Example:
        # In modules/notifications/orchestrator.py
        logger = get_module_logger()
        # context: {"component": "orchestrator",
        #           "module_path": "modules.notifications.orchestrator"}
    """
    logger = structlog.stdlib.get_logger()

    current_frame = inspect.currentframe()
    if current_frame is None:
        return logger

    frame = current_frame.f_back
    if frame is None:
        return logger

    module = inspect.getmodule(frame)
    if module:
        module_name = module.__name__
        parts = module_name.split(".")
        return logger.bind(component=parts[-1], module_path=module_name)

    return logger.bind(component="unknown")
