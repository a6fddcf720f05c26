"""Logging for the API, the CLI and migrations.

structlog loggers and stdlib loggers (uvicorn, sqlalchemy, reportlab, alembic)
share one processor chain and one root handler. Output is colored console text
by default; ``QUICKINVOICE_LOG_FORMAT=json`` writes one JSON object per line
instead.
"""

import logging
import sys
from typing import Literal, TextIO

import structlog
from structlog.typing import Processor

from quickinvoice.config import settings

LogFormat = Literal["console", "json"]

# Third-party loggers and the lowest level still let through
QUIET_LOGGERS: dict[str, int] = {
    "asyncio": logging.INFO,
    "reportlab": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,  # echo=True logs every statement at INFO
    "sqlalchemy.pool": logging.WARNING,
    "alembic.runtime.migration": logging.INFO,
}


def _shared_processors(log_format: LogFormat) -> list[Processor]:
    if log_format == "json":
        timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    else:
        timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False)
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderers(log_format: LogFormat, stream: TextIO) -> list[Processor]:
    if log_format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=stream.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    *,
    level: str | None = None,
    log_format: LogFormat | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging to a single handler on ``stream``.

    Level and format default to the settings; the stream defaults to stdout.
    Replaces any handlers already on the root logger.
    """
    log_format = log_format or settings.log_format
    stream = stream or sys.stdout
    shared_processors = _shared_processors(log_format)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # Records from plain stdlib loggers get the same fields as structlog events
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderers(log_format, stream),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


_configured = False


def setup_logging(*, stream: TextIO | None = None) -> None:
    """Configure logging on first call only; later calls are no-ops."""
    global _configured
    if not _configured:
        configure_logging(stream=stream)
        _configured = True
