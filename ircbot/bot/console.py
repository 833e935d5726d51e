"""Console bridge: stdin lines become commands for the live connection."""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, TextIO

from ..constants import CONSOLE_THREAD_NAME
from ..logs.logger import logger
from .commands import (
    action_command,
    join_command,
    nick_command,
    notice_command,
    part_command,
    privmsg_command,
    quit_command,
    raw_command,
)
from .control_channel import ControlChannelSlot

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.connection import Command

USAGE = {
    "quit": "quit [message]",
    "join": "join <channel> [key]",
    "part": "part <channel> [message]",
    "msg": "msg <dst> <text>",
    "notice": "notice <dst> <text>",
    "me": "me <dst> <text>",
    "nick": "nick <nick>",
    "raw": "raw <line>",
    "reload": "reload",
}


def _usage(verb: str) -> None:
    logger.log_event(
        "console", "usage", level=logging.WARNING, command=verb, usage=USAGE[verb]
    )


def _dst_text(rest: str, factory: Callable[[str, str], Command]) -> Command | None:
    parts = rest.split(None, 1)
    if len(parts) < 2:
        return None
    return factory(parts[0], parts[1])


def parse_command(  # noqa: C901
    text: str, *, reload_command: Command | None = None
) -> Command | None:
    """Parse one console line into at most one Command."""
    text = text.strip()
    if text.startswith("/"):
        text = text[1:]
    if not text:
        return None
    verb, _, rest = text.partition(" ")
    verb = verb.lower()
    rest = rest.strip()

    command: Command | None = None
    if verb == "quit":
        command = quit_command(rest or None)
    elif verb in ("join", "part"):
        parts = rest.split(None, 1)
        if parts:
            extra = parts[1] if len(parts) > 1 else None
            if verb == "join":
                command = join_command(parts[0], extra)
            else:
                command = part_command(parts[0], extra)
    elif verb == "msg":
        command = _dst_text(rest, privmsg_command)
    elif verb == "notice":
        command = _dst_text(rest, notice_command)
    elif verb == "me":
        command = _dst_text(rest, action_command)
    elif verb == "nick":
        if rest and " " not in rest:
            command = nick_command(rest)
    elif verb == "raw":
        if rest:
            command = raw_command(rest)
    elif verb == "reload":
        if reload_command is None:
            logger.log_event("console", "reload_unavailable", level=logging.WARNING)
            return None
        command = reload_command
    else:
        logger.log_event(
            "console", "unknown_command", level=logging.WARNING, command=verb
        )
        return None

    if command is None:
        _usage(verb)
    return command


class ConsoleBridge:
    """Reads stdin on a daemon thread and forwards parsed commands."""

    def __init__(
        self,
        slot: ControlChannelSlot,
        stream: TextIO | None = None,
        reload_command: Command | None = None,
    ) -> None:
        self.slot = slot
        self.stream = stream
        self.reload_command = reload_command
        self.thread: threading.Thread | None = None

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(
            target=self.run, name=CONSOLE_THREAD_NAME, daemon=True
        )
        self.thread.start()
        return self.thread

    def run(self) -> None:
        stream = self.stream if self.stream is not None else sys.stdin
        try:
            for line in stream:
                command = parse_command(line, reload_command=self.reload_command)
                if command is not None:
                    self.slot.try_send(command, source="console")
        except (OSError, ValueError) as e:
            # stdin closed underneath us
            logger.log_event("console", "read_error", level=logging.DEBUG, error=str(e))
        logger.log_event("console", "eof", level=logging.DEBUG)
