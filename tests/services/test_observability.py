"""Structured Logging — tests for the JSON formatter and handler setup.

Tests cover:
    - coordination fields copied from extra, enums flattened, unknown extras dropped
    - timestamp taken from the record, not the formatting time
    - setup_logging replaces its own handler instead of stacking
"""

import json
import logging

from pairgate.core.domain_types import ActionKind
from pairgate.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "pairgate.test", logging.INFO, __file__, 1, "tap on %s", ("e1",), None,
    )
    record.created = 1_750_000_000.0
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_carries_context_fields():
    line = JSONFormatter().format(_record(
        viewer_id="v1", kind=ActionKind.RSVP, secret="nope", candidate_id=None,
    ))
    entry = json.loads(line)
    assert entry["message"] == "tap on e1"
    assert entry["viewer_id"] == "v1"
    assert entry["kind"] == "rsvp"
    assert "secret" not in entry
    assert "candidate_id" not in entry
    assert entry["timestamp"].startswith("2025-06-15T15:06:40")


def test_setup_logging_replaces_its_handler():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    first = setup_logging("DEBUG", "json")
    second = setup_logging("WARNING", "text")
    try:
        assert first not in root.handlers
        assert second in root.handlers
        assert not isinstance(second.formatter, JSONFormatter)
        assert root.level == logging.WARNING
    finally:
        root.removeHandler(second)
        root.setLevel(level)
    assert root.handlers == before
