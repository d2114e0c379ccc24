"""Logging configuration."""

import logging
import sys
from typing import Optional

import structlog

from ..config import Settings


def configure_logging(
    level: str = "INFO", fmt: str = "console", settings: Optional[Settings] = None
) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        level: Log level name
        fmt: "json" for machine-readable output, "console" for humans
        settings: Optional settings object overriding level and fmt
    """
    if settings is not None:
        level = settings.log_level
        fmt = settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]
    if fmt == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
