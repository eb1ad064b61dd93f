"""Structured Logging — one JSON object per line, with coordination context.

Invariants:
    - Every line has timestamp (record creation time, UTC), level, logger, message
    - Coordination fields (viewer_id, action_id, kind, error_code, ...) are copied
      from `extra` when present and non-null; unknown extras are dropped
    - Enum values are written as their plain value
    - setup_logging is idempotent: a second call replaces the handler it installed

Design Decisions:
    - stdlib logging + a JSON formatter, no logging dependency
    - "text" format is for local runs; anything else means JSON
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum

CONTEXT_FIELDS = (
    "viewer_id", "candidate_id", "action_id", "kind", "error_code",
    "status", "transitioned", "path",
)
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_installed: logging.Handler | None = None


def _plain(value):
    return value.value if isinstance(value, Enum) else value


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, _plain(getattr(record, name)))
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the PairGate handler on the root logger and return it."""
    global _installed
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(TEXT_FORMAT) if fmt == "text" else JSONFormatter(),
    )
    root = logging.getLogger()
    if _installed is not None:
        root.removeHandler(_installed)
    root.addHandler(handler)
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
    _installed = handler
    return handler
