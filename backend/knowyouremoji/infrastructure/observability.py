"""Logging setup: JSON lines for the API, key=value text for the CLI.

Invariants:
    - Both formats carry the same context fields (EXTRA_KEYS); unknown
      record attributes never reach the output
    - Timestamps come from the record's creation time, in UTC
    - setup_logging owns exactly one root handler, found by name, and
      replaces it on repeat calls

Design Decisions:
    - stdlib logging with extra={...} at call sites; formatters only decide
      the rendering
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO

EXTRA_KEYS = (
    "error_code", "attempt", "cache_key", "request_hash", "path", "file",
    "input_tokens", "output_tokens",
)

_HANDLER_NAME = "knowyouremoji"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def record_extras(record: logging.LogRecord) -> dict:
    """Context fields attached through extra=, in EXTRA_KEYS order."""
    return {
        key: record.__dict__[key]
        for key in EXTRA_KEYS
        if record.__dict__.get(key) is not None
    }


def _utc_iso(created: float) -> str:
    return datetime.fromtimestamp(created, timezone.utc).isoformat(timespec="milliseconds")


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": _utc_iso(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class KeyValueFormatter(logging.Formatter):
    """Plain text line followed by the context fields as key=value pairs."""

    def __init__(self):
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in extras.items())
        # traceback, if any, stays on the lines after the first
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def build_handler(fmt: str = "json", stream: IO[str] | None = None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else KeyValueFormatter())
    return handler


def setup_logging(
    level: str = "INFO", fmt: str = "json", stream: IO[str] | None = None,
) -> None:
    """Install (or replace) the process log handler and set the root level."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(build_handler(fmt, stream))
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
