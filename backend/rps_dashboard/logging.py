"""structlog setup for the API, record routes and PDF/mail services."""

import logging
import sys

import structlog
from structlog.typing import Processor

from rps_dashboard.config import settings

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "multipart", "PIL")


def _shared_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def build_renderer(environment: str) -> Processor:
    """JSON lines in production, colored console output elsewhere"""
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)


def configure_logging(environment: str = settings.ENVIRONMENT, level: str = settings.LOG_LEVEL) -> logging.Handler:
    shared = _shared_chain()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and SQLAlchemy records reach the same renderer through foreign_pre_chain
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, build_renderer(environment)],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


_handler = None


def setup_logging() -> None:
    global _handler
    if _handler is None or _handler not in logging.getLogger().handlers:
        _handler = configure_logging()
