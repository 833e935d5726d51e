"""The ``irc`` object handed to each plugin's ``setup`` hook.

Plugins register handlers with ``irc.add_handler(event, func)``. Event names
are raw command tokens (``"PRIVMSG"``), zero-padded numerics (``"001"``) or
one of the special names exposed as attributes:

``irc.CONNECTED``     no args
``irc.DISCONNECTED``  no args
``irc.RELOADED``      no args, sent instead of CONNECTED after a plugin reload
``irc.ACTION``        dst, text
``irc.CTCP``          ctcp command, dst, optional text
``irc.CTCPREPLY``     ctcp command, dst, optional text

``host``, ``me``, ``privmsg`` and ``notice`` need a live connection and raise
``NoActiveConnectionError`` otherwise.
"""

from __future__ import annotations

from ..errors import ScriptArgumentError
from .context import Handler, ScriptContext
from .events import (
    EVT_ACTION,
    EVT_CONNECTED,
    EVT_CTCP,
    EVT_CTCPREPLY,
    EVT_DISCONNECTED,
    EVT_RELOADED,
    Sender,
)


def _check_text(value: object, what: str) -> str | bytes:
    if not isinstance(value, str | bytes):
        raise ScriptArgumentError(f"{what} must be str or bytes, got {type(value).__name__}")
    return value


class IrcLibrary:
    CONNECTED = EVT_CONNECTED
    DISCONNECTED = EVT_DISCONNECTED
    RELOADED = EVT_RELOADED
    ACTION = EVT_ACTION
    CTCP = EVT_CTCP
    CTCPREPLY = EVT_CTCPREPLY

    def __init__(self, context: ScriptContext) -> None:
        self._context = context

    def add_handler(self, event: str | bytes, callback: Handler) -> None:
        self._context.add_handler(event, callback)

    def host(self) -> str:
        return self._context.connection().host()

    def me(self) -> Sender:
        return self._context.connection().me().to_record()

    def privmsg(self, dst: str | bytes, text: str | bytes) -> None:
        dst = _check_text(dst, "dst")
        text = _check_text(text, "text")
        conn = self._context.connection()
        try:
            conn.privmsg(dst, text)
        except ValueError as e:
            raise ScriptArgumentError(str(e)) from e

    def notice(self, dst: str | bytes, text: str | bytes) -> None:
        dst = _check_text(dst, "dst")
        text = _check_text(text, "text")
        conn = self._context.connection()
        try:
            conn.notice(dst, text)
        except ValueError as e:
            raise ScriptArgumentError(str(e)) from e
