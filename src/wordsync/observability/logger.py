"""Structured JSON logger for wordsync.

Every log record is emitted as a single-line JSON object, e.g.::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "INFO",
     "logger": "wordsync.sync", "message": "Page reprocessed",
     "op": "sync_page", "page_id": "abc123", "word_count": 812}

Usage::

    from wordsync.observability import get_logger

    log = get_logger("wordsync.sync")
    log.info("Page skipped", extra={"extra_fields": {"page_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed via ``extra={"extra_fields": {...}}`` are merged into the
    top-level object; ``exc_info`` and ``stack_info`` are serialised when
    present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name so ``get_logger`` stays idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "wordsync",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"wordsync"``.
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.
        Only applied the first time *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        A logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* do not add duplicate handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger


def set_level(level: int | str) -> None:
    """Apply *level* to every logger created through :func:`get_logger`."""
    resolved = level.upper() if isinstance(level, str) else level
    for name in _configured_loggers:
        logging.getLogger(name).setLevel(resolved)
