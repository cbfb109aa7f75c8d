"""Logging configuration using structlog.

Everything goes through one stdlib handler so that uvicorn, dramatiq and
SQLAlchemy records share the structlog format. ``LOG_FORMAT=json`` switches
the renderer to one JSON object per line for log shippers.
"""

import logging
import sys

import structlog
from structlog.typing import Processor

from labinventory.config import settings

# Third-party loggers and the level they are capped at
_NOISY_LOGGERS: dict[str, int] = {
    "asyncio": logging.INFO,
    "dramatiq": logging.INFO,
    "aiosqlite": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    # SQLAlchemy logs SQL at INFO when echo=True
    "sqlalchemy.engine.Engine": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(log_format: str | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Call this early in application startup (main.py, tasks/__init__.py, scripts).
    """
    log_format = (log_format or settings.log_format).lower()

    shared_processors: list[Processor] = [
        # request_id / method / path bound by the HTTP middleware
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso" if log_format == "json" else "%Y-%m-%d %H:%M:%S", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "json":
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name, level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def bind_request_context(**values: str) -> None:
    """Attach values to every log line emitted for the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


# Allow re-import without side effects
_configured = False


def setup_logging() -> None:
    """Setup logging once. Safe to call multiple times."""
    global _configured
    if not _configured:
        configure_logging()
        _configured = True
