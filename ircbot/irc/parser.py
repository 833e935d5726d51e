"""IRC line parsing and formatting."""

from __future__ import annotations

from ..errors import ParsingError
from .models import (
    CommandKind,
    IRCAction,
    IRCCmd,
    IRCCode,
    IRCCTCP,
    IRCCTCPReply,
    Line,
    User,
)

CTCP_DELIM = b"\x01"
_FORBIDDEN = (b"\r", b"\n", b"\x00")


def parse_line(raw_line: bytes) -> Line:
    """Parse one raw line (with or without CRLF) into a Line.

    IRCv3 message tags are accepted and dropped.

    Raises:
        ParsingError: If the line has no command.
    """
    line = raw_line.rstrip(b"\r\n")

    if line.startswith(b"@"):
        if b" " not in line:
            raise ParsingError(f"tags without command: {raw_line!r}")
        _, line = line.split(b" ", 1)
        line = line.lstrip(b" ")

    prefix: User | None = None
    if line.startswith(b":"):
        if b" " not in line:
            raise ParsingError(f"prefix without command: {raw_line!r}")
        raw_prefix, line = line[1:].split(b" ", 1)
        if raw_prefix:
            prefix = User.parse(raw_prefix)

    trailing: bytes | None = None
    if b" :" in line:
        line, trailing = line.split(b" :", 1)
    elif line.startswith(b":"):
        raise ParsingError(f"missing command: {raw_line!r}")

    parts = line.split()
    if not parts:
        raise ParsingError(f"missing command: {raw_line!r}")
    token, args = parts[0], parts[1:]
    if trailing is not None:
        args.append(trailing)

    return Line(command=_command_kind(token), args=args, prefix=prefix)


def _command_kind(token: bytes) -> CommandKind:
    if len(token) == 3 and token.isdigit():
        return IRCCode(int(token))
    return IRCCmd(token.decode("ascii", errors="replace"))


def _split_ctcp(line: Line) -> Line:
    """Rewrite PRIVMSG/NOTICE lines carrying a CTCP payload."""
    if not isinstance(line.command, IRCCmd) or len(line.args) != 2:
        return line
    name = line.command.name.upper()
    if name not in ("PRIVMSG", "NOTICE"):
        return line
    dst, text = line.args
    if not text.startswith(CTCP_DELIM) or len(text) < 2:
        return line
    body = text[1:]
    if body.endswith(CTCP_DELIM):
        body = body[:-1]
    if b" " in body:
        ctcp_cmd, rest = body.split(b" ", 1)
        ctcp_args = [rest]
    else:
        ctcp_cmd, ctcp_args = body, []
    if not ctcp_cmd:
        return line

    if name == "NOTICE":
        return Line(IRCCTCPReply(ctcp_cmd, dst), ctcp_args, line.prefix)
    if ctcp_cmd.upper() == b"ACTION":
        return Line(IRCAction(dst), ctcp_args or [b""], line.prefix)
    return Line(IRCCTCP(ctcp_cmd, dst), ctcp_args, line.prefix)


def parse_message(raw_line: bytes) -> Line:
    """Parse a raw line and decode CTCP payloads into their own command kinds."""
    return _split_ctcp(parse_line(raw_line))


def to_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def build_line(command: str | bytes, *args: str | bytes) -> bytes:
    """Format an outgoing line (CRLF terminated).

    The last argument is sent as a trailing parameter when it needs to be.

    Raises:
        ValueError: If any part contains CR, LF or NUL, or a middle argument
            contains a space.
    """
    parts = [to_bytes(command)]
    encoded = [to_bytes(a) for a in args]
    for part in [parts[0], *encoded]:
        if any(c in part for c in _FORBIDDEN):
            raise ValueError(f"illegal character in IRC line part: {part!r}")
    for i, arg in enumerate(encoded):
        last = i == len(encoded) - 1
        if last and (not arg or b" " in arg or arg.startswith(b":")):
            parts.append(b":" + arg)
        elif not arg or b" " in arg or arg.startswith(b":"):
            raise ValueError(f"middle argument cannot be empty or contain spaces: {arg!r}")
        else:
            parts.append(arg)
    return b" ".join(parts) + b"\r\n"


def build_ctcp(command: str | bytes, text: str | bytes | None = None) -> bytes:
    payload = to_bytes(command)
    if text:
        payload += b" " + to_bytes(text)
    return CTCP_DELIM + payload + CTCP_DELIM
