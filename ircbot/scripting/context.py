"""Per-plugin scripting state: handler registry and connection binding."""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from ..errors import NoActiveConnectionError, ScriptArgumentError
from ..logs.logger import logger
from .events import EVT_RELOADED, Sender, event_arguments, event_name

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.connection import IRCConnection
    from ..irc.models import Event

Handler = Callable[..., object]


def _isolate(value: object) -> object:
    """Give each handler its own copy of structured values."""
    if isinstance(value, dict | list):
        return copy.deepcopy(value)
    return value


class ScriptContext:
    """State owned by one loaded plugin.

    The handler registry is created on first registration and lives as long
    as the context, across reconnections. The connection handle is only bound
    between ``activate`` and ``deactivate``; connection-bound calls made
    outside that window raise ``NoActiveConnectionError``.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: dict[str, list[Handler]] | None = None
        self._conn: IRCConnection | None = None

    # Connection binding

    def activate(self, conn: IRCConnection) -> None:
        self._conn = conn

    def deactivate(self) -> None:
        self._conn = None

    @property
    def active(self) -> bool:
        return self._conn is not None

    def connection(self) -> IRCConnection:
        if self._conn is None:
            raise NoActiveConnectionError()
        return self._conn

    # Registry

    def add_handler(self, event: str | bytes, callback: Handler) -> None:
        if isinstance(event, bytes):
            try:
                event = event.decode("ascii")
            except UnicodeDecodeError as e:
                raise ScriptArgumentError("event name must be ASCII") from e
        if not isinstance(event, str):
            raise ScriptArgumentError(
                f"event name must be a string, got {type(event).__name__}"
            )
        if not callable(callback):
            raise ScriptArgumentError(
                f"handler must be callable, got {type(callback).__name__}"
            )
        if self._handlers is None:
            self._handlers = {}
        self._handlers.setdefault(event, []).append(callback)
        logger.log_event(
            "script",
            "handler_added",
            level=logging.DEBUG,
            plugin=self.name,
            event=event,
            handler=getattr(callback, "__name__", repr(callback)),
        )

    def handlers_for(self, name: str) -> Sequence[Handler]:
        if self._handlers is None:
            return ()
        return tuple(self._handlers.get(name, ()))

    def has_handlers(self, name: str) -> bool:
        return bool(self._handlers and self._handlers.get(name))

    # Dispatch

    async def dispatch_event(self, event: Event) -> int:
        """Call every handler registered for ``event``; returns how many ran.

        Nothing is built for events nobody listens to.
        """
        name = event_name(event)
        if not self.has_handlers(name):
            return 0
        sender, args = event_arguments(event)
        return await self._invoke(name, sender, args)

    async def dispatch_reloaded(self) -> int:
        if not self.has_handlers(EVT_RELOADED):
            return 0
        return await self._invoke(EVT_RELOADED, None, [])

    async def _invoke(self, name: str, sender: Sender | None, args: list[object]) -> int:
        handlers = self.handlers_for(name)
        for handler in handlers:
            call_args = [_isolate(sender), *(_isolate(a) for a in args)]
            try:
                result = handler(name, *call_args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "script",
                    "handler_error",
                    level=logging.ERROR,
                    plugin=self.name,
                    event=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return len(handlers)
