"""Logging configuration for the celebrity indexing service."""
import logging
import sys
from typing import List

import structlog
from structlog.stdlib import ProcessorFormatter

from celebindex.core.config import settings

# AWS SDK and HTTP client loggers are chatty at INFO.
QUIET_LOGGERS = ("boto3", "botocore", "aiobotocore", "urllib3")


def _renderer() -> structlog.types.Processor:
    if settings.ENVIRONMENT == "development":
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging() -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Development gets colored console output; every other environment
    gets one JSON object per line with formatted tracebacks.
    """
    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.ENVIRONMENT != "development":
        processors.append(structlog.processors.format_exc_info)
    processors.append(ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProcessorFormatter(processor=_renderer()))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    get_logger(__name__).debug(
        "Logging configured", environment=settings.ENVIRONMENT, level=settings.LOG_LEVEL
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
