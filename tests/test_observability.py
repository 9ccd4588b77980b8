"""
test_observability.py - Tests for structured logging.
"""

import json
import logging
import sys

import pytest

from realm_sync_config.observability import ConfigLogger, JSONFormatter, configure_logging


def make_record(**extra):
    record = logging.LogRecord(
        name="realm_sync_config.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "realm_sync_config.test"
        assert data["message"] == "hello world"
        assert "timestamp" in data

    def test_extra_fields(self):
        data = json.loads(JSONFormatter().format(make_record(event="path_fallback", limit=256)))
        assert data["event"] == "path_fallback"
        assert data["limit"] == 256

    def test_unserializable_extra_is_stringified(self):
        data = json.loads(JSONFormatter().format(make_record(obj=object())))
        assert data["obj"].startswith("<object object")

    def test_extra_can_be_disabled(self):
        data = json.loads(JSONFormatter(include_extra=False).format(make_record(event="x")))
        assert "event" not in data

    def test_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestConfigLogger:
    def test_events(self, caplog):
        events = ConfigLogger("realm_sync_config.test")
        with caplog.at_level(logging.DEBUG, logger="realm_sync_config.test"):
            events.locator_normalized("/~/default", "realms://h/~/default")
            events.path_fallback("hashed_name", "/long/path", 256)
            events.configuration_built("realms://h/u/default", "/data/u/u/default", "full")
            events.build_failed(None, ValueError("bad"))

        assert [r.event for r in caplog.records] == [
            "locator_normalized",
            "path_fallback",
            "configuration_built",
            "build_failed",
        ]
        assert caplog.records[1].levelno == logging.INFO
        assert caplog.records[3].levelno == logging.WARNING
        assert caplog.records[3].error_type == "ValueError"


def test_configure_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "config.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(level="INFO", json_format=False, log_file=str(log_file))
        logging.getLogger("realm_sync_config.test").info("written", extra={"event": "test"})
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    line = json.loads(log_file.read_text().splitlines()[0])
    assert line["message"] == "written"
    assert line["event"] == "test"


def test_configure_logging_rejects_unknown_level():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    with pytest.raises(ValueError):
        configure_logging(level="bogus")
    assert root.handlers == saved_handlers
