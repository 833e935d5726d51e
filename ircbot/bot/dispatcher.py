"""Built-in reactions to connection events, then fan-out to plugins."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..irc.models import Connected, Disconnected, IRCCode, LineReceived
from ..logs.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from ..config.model import ServerConfig
    from ..irc.connection import IRCConnection
    from ..irc.models import Event
    from ..scripting.manager import PluginManager

RPL_WELCOME = 1


class EventDispatcher:
    """The connection's event handler."""

    def __init__(self, server: ServerConfig, plugins: PluginManager | None = None):
        self.server = server
        self.plugins = plugins

    async def handle(self, conn: IRCConnection, event: Event) -> None:
        self._builtin(conn, event)
        if self.plugins is None:
            return
        try:
            await self.plugins.dispatch_irc_event(conn, event)
        finally:
            if isinstance(event, Disconnected):
                self.plugins.deactivate()

    def _builtin(self, conn: IRCConnection, event: Event) -> None:
        if isinstance(event, Connected):
            logger.log_event("dispatcher", "connected", server=conn.host())
            if self.plugins is not None:
                self.plugins.activate(conn)
        elif isinstance(event, Disconnected):
            logger.log_event("dispatcher", "disconnected", server=conn.host())
        elif isinstance(event, LineReceived):
            command = event.line.command
            if isinstance(command, IRCCode) and command.code == RPL_WELCOME:
                logger.log_event(
                    "dispatcher",
                    "logged_in",
                    server=conn.host(),
                    nick=conn.me().nick.decode("utf-8", errors="replace"),
                )
                self._autojoin(conn)

    def _autojoin(self, conn: IRCConnection) -> None:
        for channel in self.server.autojoin:
            logger.log_event(
                "dispatcher",
                "autojoin",
                level=logging.DEBUG,
                server=conn.host(),
                target=channel.name,
            )
            conn.join(channel.name, channel.key)

    def connection_ended(self) -> None:
        """Unbind plugins once an attempt is over, however it ended."""
        if self.plugins is not None:
            self.plugins.deactivate()
