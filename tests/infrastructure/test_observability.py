import json
import logging

from cashtrackr.infrastructure.observability import (
    JSONFormatter, TextFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "cashtrackr.test", logging.WARNING, __file__, 1, "Budget deleted", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_known_extras():
    line = json.loads(JSONFormatter().format(_record(user_id=3, budget_id=9)))
    assert line["message"] == "Budget deleted"
    assert line["level"] == "WARNING"
    assert line["user_id"] == 3
    assert line["budget_id"] == 9


def test_json_formatter_ignores_unknown_extras():
    line = json.loads(JSONFormatter().format(_record(password="secret")))
    assert "password" not in line


def test_text_formatter_appends_context():
    line = TextFormatter().format(_record(user_id=3, token="123456"))
    assert line.endswith("[user_id=3]")
    assert "123456" not in line


def test_setup_logging_does_not_stack_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("INFO", "text")
        setup_logging("DEBUG", "json")
        installed = [h for h in root.handlers if h.get_name() == "cashtrackr"]
        assert len(installed) == 1
        assert isinstance(installed[0].formatter, JSONFormatter)
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)
