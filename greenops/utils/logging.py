"""
Structured logging configuration using structlog.

JSON lines by default (``APP_LOG_FORMAT=json``), colored console output
with ``APP_LOG_FORMAT=console``. Standard-library loggers (uvicorn, httpx)
are routed through the same renderer.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from config.settings import get_settings

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure structlog and the root logger.

    Args:
        log_level: Overrides ``settings.log_level``
        log_format: ``json`` or ``console``; overrides ``settings.log_format``
    """
    settings = get_settings()
    level = log_level or settings.log_level
    fmt = log_format or settings.log_format

    shared = _shared_processors()
    if fmt == "json":
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
        chain = shared + [structlog.processors.format_exc_info, renderer]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        chain = shared + [renderer]

    structlog.configure(
        processors=chain,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class LogContext:
    """Bind key/values to every log line emitted inside the block."""

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.kwargs)
        return self

    def __exit__(self, *args: Any) -> None:
        # Restores any outer binding of the same key
        structlog.contextvars.reset_contextvars(**self._tokens)


def log_context(**kwargs: Any) -> LogContext:
    """Add context to all logs within the context manager."""
    return LogContext(**kwargs)
