"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the reconnect loop and the
scripting layer. Raw socket errors never reach the supervisor directly; the
connection wraps them into one of the classes below.

Classes:
  InternalError            – Base for all internal errors.
  IRCError                 – Anything that ends a connection attempt.
  NetworkError             – Transport problems.
  ConnectError             – The TCP connection could not be established.
  ConnectionIOError        – An established link failed (resets backoff).
  ProtocolError            – The server spoke something we cannot continue with.
  ParsingError             – A single line could not be parsed.
  ConfigError              – Invalid or missing configuration (fatal).
  ScriptError              – Misuse of the scripting surface by a plugin.
  NoActiveConnectionError  – A connection-bound call made while unbound.
  ScriptArgumentError      – Wrong argument kinds passed from a plugin.
  PluginLoadError          – A plugin file failed to import or set up.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class IRCError(InternalError):
    """An error that terminates the current connection attempt."""


class NetworkError(IRCError):
    """Transport layer failure."""


class ConnectError(NetworkError):
    """Raised when the server cannot be reached (DNS, refused, timeout).

    The backoff delay keeps escalating across consecutive connect failures.
    """


class ConnectionIOError(NetworkError):
    """Raised when an established connection breaks (reset, EOF, silence).

    The supervisor resets its backoff delay after this error since the
    previous attempt did get through.
    """


class ProtocolError(IRCError):
    """The server sent something that ends the session (e.g. no usable nick)."""


class ParsingError(InternalError):
    """A raw IRC line could not be parsed."""


class ConfigError(InternalError):
    """Configuration missing or invalid. Not retried."""


class ScriptError(InternalError):
    """Base class for errors surfaced to plugin code."""


class NoActiveConnectionError(ScriptError):
    """A connection-bound scripting call was made without a live connection."""

    def __init__(self, message: str = "no active connection") -> None:
        super().__init__(message)


class ScriptArgumentError(ScriptError, TypeError):
    """A scripting call received an argument of the wrong kind."""


class PluginLoadError(ScriptError):
    """A plugin could not be imported or its setup hook failed."""


__all__ = [
    "InternalError",
    "IRCError",
    "NetworkError",
    "ConnectError",
    "ConnectionIOError",
    "ProtocolError",
    "ParsingError",
    "ConfigError",
    "ScriptError",
    "NoActiveConnectionError",
    "ScriptArgumentError",
    "PluginLoadError",
]
