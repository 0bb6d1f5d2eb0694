import json
import logging
import sys

from finpal.logging import JsonFormatter


def _record(msg, exc_info=None, **extra):
    rec = logging.LogRecord("finpal.test", logging.WARNING, __file__, 1, msg, (), exc_info)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_json_line_has_level_logger_and_message():
    d = json.loads(JsonFormatter().format(_record("fell back ₹")))
    assert d["lvl"] == "WARNING"
    assert d["logger"] == "finpal.test"
    assert d["msg"] == "fell back ₹"
    assert "ts" in d
    assert "exc" not in d


def test_known_extras_are_included():
    d = json.loads(JsonFormatter().format(_record("x", intent="general", user_id=7, other=1)))
    assert d["intent"] == "general"
    assert d["user_id"] == 7
    assert "other" not in d


def test_exception_text_is_included():
    try:
        raise RuntimeError("db down")
    except RuntimeError:
        rec = _record("failed", exc_info=sys.exc_info())
    d = json.loads(JsonFormatter().format(rec))
    assert "RuntimeError: db down" in d["exc"]
