"""Structured logging on structlog: colored console, optional JSONL file, contextvars."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from fieldsales.config import LOG_FILE, LOG_LEVEL, LOG_ROW_ERROR_LIMIT, LOG_TO_FILE, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Library loggers kept at WARNING; their INFO output drowns the upload summaries
QUIET_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool")

_configured = False


def _coerce_level(level_name: str) -> int:
    """Translate a string/int environment value into a logging level."""
    if level_name.isdigit():
        return int(level_name)
    return getattr(logging, level_name.upper(), logging.INFO)


def _handler(handler: logging.Handler, level: int, renderer: Any, pre_chain: list) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = logging.DEBUG if VERBOSE_LOGGING else _coerce_level(LOG_LEVEL)
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
    ]

    handlers = [_handler(logging.StreamHandler(), level, structlog.dev.ConsoleRenderer(colors=True), pre_chain)]
    if LOG_TO_FILE:
        handlers.append(
            _handler(
                logging.FileHandler(LOG_FILE, encoding="utf-8"),
                level,
                structlog.processors.JSONRenderer(),
                pre_chain,
            )
        )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)
    logging.captureWarnings(True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str = "fieldsales", **bindings: Any) -> BoundLogger:
    """Return the structured logger, optionally bound with context."""
    if not _configured:
        _configure_logging()
    logger = structlog.get_logger(name)
    if bindings:
        logger = logger.bind(**bindings)
    return logger


def log_row_errors(logger: BoundLogger, errors: Iterable[Any], limit: int = LOG_ROW_ERROR_LIMIT) -> int:
    """Log rejected rows one per entry up to limit, then one summary line. Returns the total."""
    total = 0
    for error in errors:
        total += 1
        if total <= limit:
            logger.warning("upload.row_rejected", line=error.line_number, reason=error.reason)
    if total > limit:
        logger.warning("upload.rows_rejected_truncated", total=total, logged=limit)
    return total


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Bind context to every log entry inside the block, restoring the previous values on exit."""
    with structlog.contextvars.bound_contextvars(**context):
        yield


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
