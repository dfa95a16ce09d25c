"""
Structured logging configuration
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", log_format: str = "console") -> structlog.BoundLogger:
    """
    Configure structured logging for the pedometer

    Args:
        level: Standard logging level name
        log_format: 'json' for machine-readable output, anything else for console rendering

    Returns:
        Configured logger instance
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("motion_pedometer")


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance

    Args:
        name: Optional logger name

    Returns:
        Logger instance
    """
    return structlog.get_logger(name)
