"""Logging configuration and setup."""

import logging
import sys
from enum import Enum

import structlog
from structlog.stdlib import LoggerFactory

from .correlation import InvocationIDProcessor
from .formatters import (
    ConsoleFormatter,
    JSONFormatter,
    SensitiveFieldRedactor,
    StructuredFormatter,
)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging formats."""

    JSON = "json"
    CONSOLE = "console"
    STRUCTURED = "structured"


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    format_type: LogFormat = LogFormat.JSON,
    log_file: str | None = None,
    enable_colors: bool = True,
    include_timestamps: bool = True,
) -> None:
    """Setup structured logging configuration."""
    handler: logging.Handler = (
        logging.FileHandler(log_file) if log_file else logging.StreamHandler(sys.stdout)
    )
    logging.basicConfig(
        level=getattr(logging, level.value),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        InvocationIDProcessor(),
        SensitiveFieldRedactor(),
    ]

    if include_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="ISO"))

    if format_type == LogFormat.JSON:
        processors.append(JSONFormatter())
    elif format_type == LogFormat.CONSOLE:
        processors.append(ConsoleFormatter(colors=enable_colors))
    elif format_type == LogFormat.STRUCTURED:
        processors.append(StructuredFormatter())

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    logger = structlog.get_logger(name)
    return logger  # type: ignore[no-any-return]


def setup_testing_logging() -> None:
    """Setup logging for testing environment."""
    setup_logging(
        level=LogLevel.WARNING,
        format_type=LogFormat.STRUCTURED,
        include_timestamps=False,
    )
