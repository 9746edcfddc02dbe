# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Repositories, the migration runner and the seeds log through the standard
``logging`` module. ``setup_logging`` installs one root handler whose
``ProcessorFormatter`` runs those records through the structlog chain, so
values bound with ``log_context`` (revision, backend, seed run) appear on
every line. Development gets colored console output, every other
environment gets JSON lines.

Example:
    >>> from src.utils.logging import setup_logging, log_context
    >>> from src.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> with log_context(revision="001_initial_schema", backend="postgresql"):
    ...     logging.getLogger("src.migrations").info("Applied migration")
"""

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from src.core.config.settings import Settings

LOG_HANDLER_NAME = "coursebase"

# Libraries that are chatty at DEBUG and only interesting on warnings
_QUIET_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "alembic",
    "aiosqlite",
    "asyncio",
)


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Calling it again replaces the handler installed by the previous call.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    render_chain: list[Processor]
    if settings.is_development or settings.debug:
        render_chain = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        render_chain = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
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
            *render_chain,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(LOG_HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == LOG_HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    # SQL echo is controlled by DatabaseSettings.echo, not by the log level
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("src").setLevel(log_level)


@contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Bind values to every log line emitted inside the block.

    Values bound by an enclosing block are restored on exit.

    Args:
        **values: Key-value pairs added to each event, e.g. ``revision``.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
