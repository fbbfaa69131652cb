"""Structured Logging — JSON and text formatters carrying request/resource context.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Only whitelisted extras are rendered (user_id, budget_id, expense_id,
      error_code, path, method); passwords, hashes and opaque tokens never are,
      even when a caller passes them as extras
    - setup_logging is idempotent: a second call replaces the handler it installed
      instead of stacking another one

Design Decisions:
    - Both formatters share the extras whitelist so json and text output agree
    - SQLAlchemy engine logging pinned to WARNING: statement echo would print
      bound parameters, which include password hashes
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "user_id", "budget_id", "expense_id", "error_code", "path", "method",
)

_HANDLER_NAME = "cashtrackr"


def context_fields(record: logging.LogRecord) -> dict:
    """Whitelisted extras present on the record."""
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **context_fields(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with the context extras appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = " ".join(f"{k}={v}" for k, v in context_fields(record).items())
        return f"{line} [{extras}]" if extras else line


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the application handler on the root logger."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
