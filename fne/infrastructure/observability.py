"""Structured Logging - JSON formatter and setup for FNE client observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Request extras (method, endpoint, attempt, status_code, delay_ms, error_code, error_kind)
      surfaced when present
    - JSON format for log shipping, human-readable for local development
    - setup_logging only touches the "fne" logger, never the root logger of the host application
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "method", "endpoint", "attempt", "max_attempts", "status_code",
    "delay_ms", "error_code", "error_kind", "reason", "reference",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """Attach a stream handler to the package logger. Idempotent."""
    logger = logging.getLogger("fne")
    for existing in list(logger.handlers):
        if getattr(existing, "_fne_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._fne_handler = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
