"""
Structured logging configuration using structlog
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.processors import CallsiteParameter

from virtualcomponents.config.settings import get_settings

_configured = False


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """Configure structured logging for the framework."""
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    # Processors for structlog
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.FILENAME,
                CallsiteParameter.LINENO,
                CallsiteParameter.FUNC_NAME,
            ]
        ),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add appropriate renderer based on format setting
    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # Loggers are not cached so that applications set up later pick up
    # the current configuration.
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: Optional[str] = None, **kwargs: Any) -> Any:
    """Get a configured logger instance."""
    logger = structlog.get_logger(name)
    if kwargs:
        logger = logger.bind(**kwargs)
    return logger
