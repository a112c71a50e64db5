"""Tests for nofy.observability: JSON logging."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from nofy.observability import JsonFormatter, setup_logging


def _record(msg="hello world", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="nofy.test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )


class TestJsonFormatter:
    def test_format_basic_record(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "hello world"
        assert parsed["logger"] == "nofy.test"
        assert "timestamp" in parsed

    def test_format_propagates_extra_fields(self):
        record = _record()
        record.messenger = "SlackMessenger"
        record.job_id = "job-1"
        record.status_code = 500
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["messenger"] == "SlackMessenger"
        assert parsed["job_id"] == "job-1"
        assert parsed["status_code"] == 500

    def test_format_excludes_missing_extra_fields(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert "messenger" not in parsed
        assert "job_id" not in parsed

    def test_format_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())
        parsed = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in parsed["exception"]


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_logger(self):
        logger = logging.getLogger("nofy")
        handlers, level = list(logger.handlers), logger.level
        yield
        logger.handlers[:] = handlers
        logger.setLevel(level)

    def test_json_handler_installed(self):
        setup_logging("debug")
        logger = logging.getLogger("nofy")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_text_output(self):
        setup_logging("WARNING", json_output=False)
        logger = logging.getLogger("nofy")
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("chatty")
        assert logging.getLogger("nofy").level == logging.INFO

    def test_root_logger_untouched(self):
        root_handlers = list(logging.getLogger().handlers)
        setup_logging()
        assert logging.getLogger().handlers == root_handlers

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOFY_LOG_LEVEL", "ERROR")
        setup_logging()
        assert logging.getLogger("nofy").level == logging.ERROR
