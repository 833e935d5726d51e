"""Error hierarchy and logging helpers."""

from .handling import classify_error, log_error
from .internal import (
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
)

__all__ = [
    "classify_error",
    "log_error",
    "ConfigError",
    "ConnectError",
    "ConnectionIOError",
    "InternalError",
    "IRCError",
    "NetworkError",
    "NoActiveConnectionError",
    "ParsingError",
    "PluginLoadError",
    "ProtocolError",
    "ScriptArgumentError",
    "ScriptError",
]
