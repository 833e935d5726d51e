"""SignalHandler - turns the first SIGINT into a graceful quit request."""

from __future__ import annotations

import asyncio
import logging
import signal

from ..logs.logger import logger
from .commands import quit_command
from .control_channel import ControlChannelSlot


class SignalHandler:
    """One-shot bridge from an OS signal to the Control Channel.

    The first delivery sends a quit command to the live connection (if any)
    and removes the handler, so a second interrupt gets Python's default
    KeyboardInterrupt behaviour.
    """

    def __init__(
        self, slot: ControlChannelSlot, signum: int = signal.SIGINT
    ) -> None:
        self.slot = slot
        self.signum = signum
        self.fired = False
        self._loop: asyncio.AbstractEventLoop | None = None

    def install(self, loop: asyncio.AbstractEventLoop | None = None) -> bool:
        loop = loop or asyncio.get_running_loop()
        try:
            loop.add_signal_handler(self.signum, self._on_signal)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            logger.log_event(
                "signal",
                "install_failed",
                level=logging.WARNING,
                signal=signal.Signals(self.signum).name,
                error=str(e),
            )
            return False
        self._loop = loop
        logger.log_event(
            "signal",
            "installed",
            level=logging.DEBUG,
            signal=signal.Signals(self.signum).name,
        )
        return True

    def _on_signal(self) -> None:
        if self.fired:
            return
        self.fired = True
        logger.log_event(
            "signal", "received", signal=signal.Signals(self.signum).name
        )
        self.slot.try_send(quit_command(), source="signal")
        self.uninstall()

    def uninstall(self) -> None:
        loop, self._loop = self._loop, None
        if loop is None or loop.is_closed():
            return
        try:
            loop.remove_signal_handler(self.signum)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            logger.log_event(
                "signal", "uninstall_failed", level=logging.DEBUG, error=str(e)
            )
