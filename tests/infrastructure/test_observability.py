"""Structured Logging - tests for the JSON formatter and logger setup."""

import json
import logging

from fne.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "fne.infrastructure.http_client", logging.WARNING, __file__, 1,
        "Transient failure", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    line = JSONFormatter().format(_record(method="POST", attempt=2, delay_ms=2000, unrelated="x"))
    data = json.loads(line)
    assert data["level"] == "WARNING"
    assert data["logger"] == "fne.infrastructure.http_client"
    assert data["message"] == "Transient failure"
    assert data["method"] == "POST"
    assert data["attempt"] == 2
    assert data["delay_ms"] == 2000
    assert "unrelated" not in data
    assert "timestamp" in data


def test_json_formatter_skips_none_extras():
    data = json.loads(JSONFormatter().format(_record(status_code=None)))
    assert "status_code" not in data


def test_setup_logging_idempotent():
    logger = setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")
    try:
        owned = [h for h in logger.handlers if getattr(h, "_fne_handler", False)]
        assert len(owned) == 1
        assert not isinstance(owned[0].formatter, JSONFormatter)
        assert logger.level == logging.WARNING
        assert logging.getLogger().handlers is not logger.handlers
    finally:
        for handler in list(logger.handlers):
            if getattr(handler, "_fne_handler", False):
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
