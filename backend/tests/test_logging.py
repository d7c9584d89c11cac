import json
import logging

from backend.app.logging import JsonFormatter, PlainFormatter, request_id


def _record(msg="hello"):
    return logging.LogRecord("backend.app.crud", logging.INFO, __file__, 1, msg, None, None)


def test_json_formatter_includes_request_id():
    token = request_id.set("rid-42")
    try:
        out = json.loads(JsonFormatter().format(_record()))
    finally:
        request_id.reset(token)
    assert out == {"lvl": "INFO", "msg": "hello", "logger": "backend.app.crud", "rid": "rid-42"}


def test_formatters_without_request():
    assert "rid" not in json.loads(JsonFormatter().format(_record()))
    assert PlainFormatter("%(message)s").format(_record()) == "hello"
