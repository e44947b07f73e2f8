"""Structured logging for the compliance workflow engine.

Engine modules log through ``structlog.get_logger(__name__)``. Service calls
bind the case and action they operate on with :func:`bind_case_context` so
every event emitted underneath carries them.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines instead of console output
        log_file: Optional file path that also receives stdlib log records
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


@contextmanager
def bind_case_context(
    case_id: Optional[str] = None,
    action_id: Optional[str] = None,
) -> Iterator[None]:
    """Bind case/action identifiers to every log event inside the block."""
    bound = {}
    if case_id:
        bound["case_id"] = case_id
    if action_id:
        bound["action_id"] = action_id

    with structlog.contextvars.bound_contextvars(**bound):
        yield
