"""Thread-safe route for commands into the live connection."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING

from ..logs.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.connection import Command


class ControlChannel:
    """Sending side of one connection attempt's command queue.

    ``try_send`` may be called from any thread and never blocks: the put is
    scheduled on the owning loop with ``call_soon_threadsafe``.
    """

    def __init__(
        self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[Command]
    ) -> None:
        self.loop = loop
        self.queue = queue

    def try_send(self, command: Command) -> bool:
        try:
            self.loop.call_soon_threadsafe(self.queue.put_nowait, command)
        except RuntimeError:
            # Loop already closed
            return False
        return True


class ControlChannelSlot:
    """The current ControlChannel, or None while no connection is live."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channel: ControlChannel | None = None

    def install(self, channel: ControlChannel) -> None:
        with self._lock:
            self._channel = channel

    def clear(self) -> None:
        with self._lock:
            self._channel = None

    def current(self) -> ControlChannel | None:
        with self._lock:
            return self._channel

    def try_send(self, command: Command, *, source: str = "unknown") -> bool:
        """Send ``command`` to the live connection; drop it when there is none."""
        channel = self.current()
        if channel is None or not channel.try_send(command):
            logger.log_event(
                "control", "command_dropped", level=logging.DEBUG, source=source
            )
            return False
        return True
