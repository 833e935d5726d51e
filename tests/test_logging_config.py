"""Tests for logging_config.py module."""

import logging
import os
from unittest.mock import patch

import colorlog
import pytest

from ircbot.logging_config import (
    ErrorAggregator,
    LoggerConfigurator,
    error_aggregator,
    log_structured_error,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    ircbot_level = logging.getLogger("ircbot").level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("ircbot").setLevel(ircbot_level)


class TestLoggerConfigurator:
    def test_configure_installs_single_colored_handler(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("DEBUG", "false")
        with patch("ircbot.logging_config.atexit.register") as register:
            level = LoggerConfigurator().configure()
        root = restore_root_logger
        assert level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, colorlog.ColoredFormatter)
        assert logging.getLogger("watchdog").level == logging.INFO
        register.assert_called_once()

    def test_debug_flag_forces_debug_and_sets_env(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("DEBUG", "false")
        with patch("ircbot.logging_config.atexit.register"):
            level = LoggerConfigurator(debug=True).configure()
        assert level == logging.DEBUG
        assert logging.getLogger("ircbot").level == logging.DEBUG
        assert os.environ["DEBUG"] == "true"

    @pytest.mark.parametrize(
        ("env", "expected"),
        [("true", logging.DEBUG), ("1", logging.DEBUG), ("YES", logging.DEBUG), ("no", logging.INFO), (None, logging.INFO)],
    )
    def test_level_from_environment(self, monkeypatch, env, expected):
        if env is None:
            monkeypatch.delenv("DEBUG", raising=False)
        else:
            monkeypatch.setenv("DEBUG", env)
        assert LoggerConfigurator()._resolve_level() == expected

    def test_explicit_false_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        assert LoggerConfigurator(debug=False)._resolve_level() == logging.INFO

    def test_formatter_colors_levels(self):
        formatter = LoggerConfigurator().build_formatter()
        record = logging.LogRecord(
            name="t", level=logging.ERROR, pathname="", lineno=0, msg="bad", args=(), exc_info=None
        )
        formatted = formatter.format(record)
        assert "\033[31m" in formatted
        assert "ERROR" in formatted and "bad" in formatted


class TestStructuredErrors:
    def test_log_structured_error_formats_and_records(self, caplog):
        caplog.set_level(logging.ERROR)
        aggregator_before = error_aggregator.get_error_summary().get("network", {}).get("total_count", 0)
        log_structured_error(
            "network",
            "Connection failed",
            exception=OSError("refused"),
            context={"server": "irc.test"},
        )
        msg = caplog.records[-1].getMessage()
        assert msg == (
            "[NETWORK] Connection failed | Exception: OSError: refused | Context: server=irc.test"
        )
        after = error_aggregator.get_error_summary()["network"]["total_count"]
        assert after == aggregator_before + 1

    def test_aggregator_keeps_last_hundred(self):
        aggregator = ErrorAggregator()
        for i in range(150):
            aggregator.record_error("io", f"e{i}")
        summary = aggregator.get_error_summary()
        assert summary["io"]["total_count"] == 100
        assert summary["io"]["last_message"] == "e149"

    def test_summary_report(self, caplog):
        caplog.set_level(logging.WARNING)
        aggregator = ErrorAggregator()
        aggregator.log_summary_report()
        assert caplog.records == []
        aggregator.record_error("script", "handler blew up")
        aggregator.log_summary_report()
        assert any("script: 1 total" in r.getMessage() for r in caplog.records)
