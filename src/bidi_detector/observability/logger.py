"""Structured logging for bidi-detector.

Scan reports (per-file lines, occurrence details, the final summary) are
written directly to the orchestrator's output streams. This module covers
the diagnostic log stream only: configuration discovery, pattern expansion,
per-file errors. Logs go to stderr, as plain text by default or as one JSON
object per line with ``json_output=True`` for CI log collectors.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER_NAME = "bidi_detector"

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "event_type",
    }
)


class EventType(Enum):
    """Types of scan events that carry an ``event_type`` in the log record."""

    RUN_STARTED = "run_started"
    RUN_COMPLETED = "run_completed"
    CONFIG_LOADED = "config_loaded"
    FILE_SCANNED = "file_scanned"
    FILE_SKIPPED = "file_skipped"
    FILE_READ_ERROR = "file_read_error"
    SELECTION_ERROR = "selection_error"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        event_type = getattr(record, "event_type", "unknown")
        if isinstance(event_type, EventType):
            event_type = event_type.value

        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event_type": event_type,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def configure_logging(
    level: str | int = logging.WARNING,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling this again replaces the previous handler, so repeated CLI
    invocations in one process (as in tests) do not duplicate output.

    Args:
        level: Level name (``"debug"``, ``"INFO"``...) or logging constant
        json_output: Emit JSON lines instead of plain text
        stream: Target stream (default: ``sys.stderr`` at call time)

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
