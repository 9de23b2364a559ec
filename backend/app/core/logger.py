"""
structlog configuration.

JSON lines in production; colored console output with rich tracebacks when
``ENVIRONMENT=development`` or ``LOG_FORMAT=console``. Request-scoped fields
bound through ``structlog.contextvars`` (the request id) appear on every line.
"""
import logging
import sys
from typing import List, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from .config import settings

# Libraries whose INFO chatter drowns request logs
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "botocore", "urllib3")


def _console_output() -> bool:
    return settings.is_development or settings.log_format.lower() == "console"


def _shared_processors() -> List[structlog.typing.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger; safe to call repeatedly."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    processors = _shared_processors()
    if _console_output():
        root.addHandler(RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False))
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    else:
        root.addHandler(logging.StreamHandler(sys.stdout))
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.typing.FilteringBoundLogger:
    """Logger that tags each line with ``name`` when given."""
    logger = structlog.get_logger()
    if name:
        return logger.bind(logger=name)
    return logger


configure_logging()
