"""Connection supervisor: reconnect loop with a stepped backoff schedule."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from ..constants import RECONNECT_BACKOFF_STEP
from ..errors import ConnectionIOError, IRCError, log_error
from ..irc.connection import ConnectionOptions, IRCConnection
from ..logs.logger import logger
from .control_channel import ControlChannel, ControlChannelSlot

if TYPE_CHECKING:  # pragma: no cover
    from ..config.model import ServerConfig
    from ..irc.connection import Command
    from .dispatcher import EventDispatcher

ConnectionFactory = Callable[..., Any]


def next_backoff(delay: int) -> int:
    """Delay to use after sleeping ``delay`` seconds.

    60 is not covered by any bucket and therefore advances by the plain step
    like every delay past 300.
    """
    if delay < 5:
        return 5
    if delay < 10:
        return 10
    if delay < 20:
        return 20
    if delay < 30:
        return 30
    if delay < 60:
        return 60
    if 60 < delay < 150:
        return 150
    if 150 < delay < 300:
        return 300
    return delay + RECONNECT_BACKOFF_STEP


class ConnectionSupervisor:
    """Keeps one server connection alive until a graceful quit.

    Every attempt gets a fresh command queue whose ControlChannel is published
    in the shared slot for the duration of the attempt.
    """

    def __init__(
        self,
        server: ServerConfig,
        slot: ControlChannelSlot,
        dispatcher: EventDispatcher,
        *,
        connection_factory: ConnectionFactory = IRCConnection,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.server = server
        self.slot = slot
        self.dispatcher = dispatcher
        self.connection_factory = connection_factory
        self._sleep = sleep
        self.backoff: int | None = server.reconnect_time
        self.attempts = 0

    async def run(self) -> bool:
        """Run until the session ends for good.

        Returns:
            True after a graceful quit, False when an error ended the session
            and reconnecting is disabled.
        """
        while True:
            try:
                await self._attempt()
            except ConnectionIOError as e:
                log_error(
                    "Connection lost",
                    e,
                    {"server": self.server.host, "attempt": self.attempts},
                )
                self.backoff = self.server.reconnect_time
            except IRCError as e:
                log_error(
                    "Connection failed",
                    e,
                    {"server": self.server.host, "attempt": self.attempts},
                )
            else:
                logger.log_event("supervisor", "quit", server=self.server.host)
                return True

            if self.backoff is None:
                logger.log_event(
                    "supervisor",
                    "reconnect_disabled",
                    level=logging.WARNING,
                    server=self.server.host,
                )
                return False
            logger.log_event(
                "supervisor",
                "reconnect_wait",
                server=self.server.host,
                delay=self.backoff,
            )
            await self._sleep(self.backoff)
            if self.server.reconnect_backoff:
                self.backoff = next_backoff(self.backoff)

    async def _attempt(self) -> None:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[Command] = asyncio.Queue()
        conn = self.connection_factory(
            ConnectionOptions.from_server(self.server),
            self.dispatcher.handle,
            queue,
        )
        self.slot.install(ControlChannel(loop, queue))
        self.attempts += 1
        logger.log_event(
            "supervisor",
            "attempt",
            server=self.server.host,
            port=self.server.port,
            attempt=self.attempts,
        )
        try:
            await conn.run()
        finally:
            self.slot.clear()
            self.dispatcher.connection_ended()
