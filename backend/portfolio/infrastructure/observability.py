"""Structured Logging — record-catalog context on every log line.

Invariants:
    - Every line carries timestamp (from the LogRecord), level, logger name, message
    - Catalog context (record_kind, record_id, operation, error_code, count, path)
      is attached through `extra=` and rendered only when present
    - JSON lines when LOG_FORMAT=json, "key=value" suffixes otherwise; both
      formats render the same context keys
    - setup_logging is idempotent: re-running it replaces the portfolio handler

Design Decisions:
    - stdlib logging with a custom Formatter: the log pipeline needs nothing else
    - log_context() builds the extra dict so call sites cannot misspell a key
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

CONTEXT_FIELDS = ("record_kind", "record_id", "operation", "error_code", "count", "path")
HANDLER_NAME = "portfolio"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def log_context(record_kind: str | None = None, operation: str | None = None, **fields: Any) -> dict:
    """`extra=` payload for catalog log calls. Unknown keys are rejected."""
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
    context = {"record_kind": record_kind, "operation": operation, **fields}
    return {key: value for key, value in context.items() if value is not None}


def _context_of(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in CONTEXT_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_of(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with the catalog context appended as key=value pairs."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context_of(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the portfolio handler on the root logger. Safe to call more than once."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    handler.set_name(HANDLER_NAME)
    for existing in list(logging.root.handlers):
        if existing.get_name() == HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
