"""Translation of connection events into the plugin call convention.

Handlers are called as ``handler(event_name, sender, *args)``. The sender is
``None`` when the line had no prefix, otherwise a dict with ``raw``, ``nick``,
``user`` and ``host``. Regular commands pass the server's arguments through
unvalidated; only the CTCP events guarantee their argument layout:

``ACTION``     dst, text
``CTCP``       ctcp command, dst, [text]
``CTCPREPLY``  ctcp command, dst, [text]
"""

from __future__ import annotations

from ..irc.models import (
    Connected,
    Disconnected,
    Event,
    IRCAction,
    IRCCmd,
    IRCCode,
    IRCCTCP,
    IRCCTCPReply,
    LineReceived,
)

EVT_CONNECTED = "-CONNECTED"
EVT_DISCONNECTED = "-DISCONNECTED"
EVT_RELOADED = "-RELOADED"
EVT_ACTION = "-ACTION"
EVT_CTCP = "-CTCP"
EVT_CTCPREPLY = "-CTCPREPLY"

Sender = dict[str, bytes | None]


def event_name(event: Event) -> str:
    """Name under which handlers for ``event`` are registered."""
    if isinstance(event, Connected):
        return EVT_CONNECTED
    if isinstance(event, Disconnected):
        return EVT_DISCONNECTED
    if not isinstance(event, LineReceived):
        raise TypeError(f"not an IRC event: {event!r}")
    command = event.line.command
    if isinstance(command, IRCCode):
        return f"{command.code:03d}"
    if isinstance(command, IRCCmd):
        return command.name
    if isinstance(command, IRCAction):
        return EVT_ACTION
    if isinstance(command, IRCCTCP):
        return EVT_CTCP
    if isinstance(command, IRCCTCPReply):
        return EVT_CTCPREPLY
    raise TypeError(f"unknown command kind: {command!r}")


def event_arguments(event: Event) -> tuple[Sender | None, list[object]]:
    """Build the sender record and positional arguments for ``event``."""
    if not isinstance(event, LineReceived):
        return None, []
    line = event.line
    sender = line.prefix.to_record() if line.prefix is not None else None
    command = line.command
    if isinstance(command, IRCAction):
        return sender, [command.dst, *line.args]
    if isinstance(command, IRCCTCP | IRCCTCPReply):
        return sender, [command.command, command.dst, *line.args]
    return sender, list(line.args)
