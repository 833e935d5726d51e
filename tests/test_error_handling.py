from __future__ import annotations

import logging

import pytest

from ircbot.errors import (
    ConfigError,
    ConnectError,
    ConnectionIOError,
    InternalError,
    IRCError,
    NetworkError,
    NoActiveConnectionError,
    ParsingError,
    PluginLoadError,
    ProtocolError,
    ScriptArgumentError,
    ScriptError,
    classify_error,
    log_error,
)


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (ConnectionIOError("eof"), "io"),
        (ConnectError("refused"), "network"),
        (OSError("raw"), "network"),
        (ProtocolError("nick"), "protocol"),
        (ParsingError("line"), "parsing"),
        (ConfigError("cfg"), "config"),
        (NoActiveConnectionError(), "script"),
        (PluginLoadError("p"), "script"),
        (InternalError("x"), "internal"),
        (RuntimeError("bug"), "unknown"),
    ],
)
def test_classify_error(error, category):
    assert classify_error(error) == category


def test_hierarchy():
    assert issubclass(ConnectError, NetworkError)
    assert issubclass(ConnectionIOError, NetworkError)
    assert issubclass(NetworkError, IRCError)
    assert issubclass(ProtocolError, IRCError)
    assert not issubclass(ConfigError, IRCError)
    assert issubclass(ScriptArgumentError, ScriptError)
    assert issubclass(ScriptArgumentError, TypeError)


def test_internal_error_copies_data():
    data = {"attempt": 1}
    err = ProtocolError("x", data=data)
    data["attempt"] = 2
    assert err.data == {"attempt": 1}
    assert InternalError("y").data == {}


def test_no_active_connection_message():
    assert str(NoActiveConnectionError()) == "no active connection"


def test_log_error_uses_category(caplog):
    caplog.set_level(logging.ERROR)
    log_error("Connection lost", ConnectionIOError("reset by peer"), {"attempt": 3})
    msg = caplog.records[-1].getMessage()
    assert msg.startswith("[IO] Connection lost: reset by peer")
    assert "attempt=3" in msg
