"""IRC subsystem package.

Typed protocol values, the line parser and the asyncio connection object.
"""

from .connection import Command, ConnectionOptions, EventHandler, IRCConnection  # noqa: F401
from .models import (  # noqa: F401
    CommandKind,
    Connected,
    ConnectionState,
    Disconnected,
    Event,
    IRCAction,
    IRCCmd,
    IRCCode,
    IRCCTCP,
    IRCCTCPReply,
    Line,
    LineReceived,
    User,
)
from .parser import build_ctcp, build_line, parse_line, parse_message  # noqa: F401

__all__ = [
    "Command",
    "CommandKind",
    "Connected",
    "ConnectionOptions",
    "ConnectionState",
    "Disconnected",
    "Event",
    "EventHandler",
    "IRCAction",
    "IRCCmd",
    "IRCCode",
    "IRCConnection",
    "IRCCTCP",
    "IRCCTCPReply",
    "Line",
    "LineReceived",
    "User",
    "build_ctcp",
    "build_line",
    "parse_line",
    "parse_message",
]
