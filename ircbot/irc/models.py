"""Typed IRC values shared by the parser, the connection and the scripting layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    REGISTERING = auto()
    READY = auto()
    QUITTING = auto()


@dataclass(slots=True, frozen=True)
class User:
    """The sender of a line, from the ``nick!user@host`` prefix grammar."""

    raw: bytes
    nick: bytes
    user: bytes | None = None
    host: bytes | None = None

    @classmethod
    def parse(cls, raw: bytes) -> User:
        nick, user, host = raw, None, None
        if b"@" in nick:
            nick, host = nick.split(b"@", 1)
        if b"!" in nick:
            nick, user = nick.split(b"!", 1)
        return cls(raw=raw, nick=nick, user=user, host=host)

    def to_record(self) -> dict[str, bytes | None]:
        """Table form handed to plugins."""
        return {"raw": self.raw, "nick": self.nick, "user": self.user, "host": self.host}


# Line command kinds


@dataclass(slots=True, frozen=True)
class IRCCode:
    code: int


@dataclass(slots=True, frozen=True)
class IRCCmd:
    name: str


@dataclass(slots=True, frozen=True)
class IRCAction:
    dst: bytes


@dataclass(slots=True, frozen=True)
class IRCCTCP:
    command: bytes
    dst: bytes


@dataclass(slots=True, frozen=True)
class IRCCTCPReply:
    command: bytes
    dst: bytes


CommandKind = IRCCode | IRCCmd | IRCAction | IRCCTCP | IRCCTCPReply


@dataclass(slots=True)
class Line:
    command: CommandKind
    args: list[bytes] = field(default_factory=list)
    prefix: User | None = None


# Connection events


@dataclass(slots=True, frozen=True)
class Connected:
    pass


@dataclass(slots=True, frozen=True)
class Disconnected:
    pass


@dataclass(slots=True, frozen=True)
class LineReceived:
    line: Line


Event = Connected | Disconnected | LineReceived
