"""Asyncio IRC connection: registration, line pump and send primitives."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..constants import (
    IRC_CONNECT_TIMEOUT,
    IRC_QUIT_TIMEOUT,
    IRC_READ_TIMEOUT,
    IRC_STREAM_LIMIT,
)
from ..errors import (
    ConnectError,
    ConnectionIOError,
    IRCError,
    ParsingError,
    ProtocolError,
)
from ..logs.logger import logger
from .models import (
    Connected,
    ConnectionState,
    Disconnected,
    Event,
    IRCCmd,
    IRCCode,
    Line,
    LineReceived,
    User,
)
from .parser import build_ctcp, build_line, parse_message, to_bytes

if TYPE_CHECKING:  # pragma: no cover
    from ..config.model import ServerConfig

Command = Callable[["IRCConnection"], Awaitable[None] | None]
EventHandler = Callable[["IRCConnection", Event], Awaitable[None]]

MAX_NICK_RETRIES = 5


@dataclass(slots=True, frozen=True)
class ConnectionOptions:
    host: str
    port: int
    nick: str
    user: str
    real: str

    @classmethod
    def from_server(cls, server: ServerConfig) -> ConnectionOptions:
        return cls(
            host=server.host,
            port=server.port,
            nick=server.nick,
            user=server.user or server.nick,
            real=server.real or server.nick,
        )


class IRCConnection:  # pylint: disable=too-many-instance-attributes
    """One connection attempt to an IRC server.

    ``run`` drives the whole session and either returns (graceful quit) or
    raises an ``IRCError`` subclass describing why the session ended. The
    send primitives only buffer; buffered data is flushed after every event
    and command.
    """

    def __init__(
        self,
        options: ConnectionOptions,
        handler: EventHandler,
        commands: asyncio.Queue[Command] | None = None,
        *,
        connect_timeout: float = IRC_CONNECT_TIMEOUT,
        read_timeout: float = IRC_READ_TIMEOUT,
        quit_timeout: float = IRC_QUIT_TIMEOUT,
    ) -> None:
        self.options = options
        self.handler = handler
        self.commands = commands
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.quit_timeout = quit_timeout
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.state = ConnectionState.DISCONNECTED
        self._nick = options.nick
        self._me: User | None = None
        self._nick_retries = 0
        self._connected_emitted = False

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                server=self.options.host,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    # Session driver

    async def run(self) -> None:
        """Connect, register and pump lines until the session ends.

        Raises:
            ConnectError: The server could not be reached.
            ConnectionIOError: The established link failed.
            ProtocolError: Registration could not complete.
        """
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event(
            "irc",
            "connect_start",
            server=self.options.host,
            port=self.options.port,
        )
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(
                    self.options.host, self.options.port, limit=IRC_STREAM_LIMIT
                ),
                timeout=self.connect_timeout,
            )
        except TimeoutError as e:
            self._set_state(ConnectionState.DISCONNECTED)
            raise ConnectError(
                f"timed out connecting to {self.options.host}:{self.options.port}",
                data={"timeout": self.connect_timeout},
            ) from e
        except OSError as e:
            self._set_state(ConnectionState.DISCONNECTED)
            raise ConnectError(
                f"cannot connect to {self.options.host}:{self.options.port}: {e}"
            ) from e

        try:
            self._set_state(ConnectionState.REGISTERING)
            self._register()
            self._connected_emitted = True
            await self._emit(Connected())
            await self._pump()
        finally:
            await self._shutdown()

    def _register(self) -> None:
        self.send_raw(build_line("NICK", self._nick))
        self.send_raw(build_line("USER", self.options.user, "0", "*", self.options.real))

    async def _pump(self) -> None:
        read_task: asyncio.Task[bytes | None] | None = None
        cmd_task: asyncio.Task[Command] | None = None
        loop = asyncio.get_running_loop()
        quit_deadline: float | None = None
        try:
            while True:
                if read_task is None:
                    read_task = asyncio.ensure_future(self._read_line())
                if cmd_task is None and self.commands is not None:
                    cmd_task = asyncio.ensure_future(self.commands.get())
                timeout = None
                if self.state is ConnectionState.QUITTING:
                    if quit_deadline is None:
                        quit_deadline = loop.time() + self.quit_timeout
                    timeout = max(0.0, quit_deadline - loop.time())
                pending = {t for t in (read_task, cmd_task) if t is not None}
                done, _ = await asyncio.wait(
                    pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
                )
                if not done:
                    # Only reachable while QUITTING
                    logger.log_event(
                        "irc",
                        "quit_timeout",
                        server=self.options.host,
                        timeout=self.quit_timeout,
                    )
                    return
                if cmd_task is not None and cmd_task in done:
                    command = cmd_task.result()
                    cmd_task = None
                    await self._execute(command)
                if read_task in done:
                    raw = read_task.result()
                    read_task = None
                    if raw is None:
                        if self.state is ConnectionState.QUITTING:
                            logger.log_event(
                                "irc", "quit_complete", server=self.options.host
                            )
                            return
                        raise ConnectionIOError("connection closed by server")
                    if raw.strip():
                        await self._handle_raw(raw)
        finally:
            for task in (read_task, cmd_task):
                if task is not None and not task.done():
                    task.cancel()

    async def _read_line(self) -> bytes | None:
        """Read one line; None on EOF, empty bytes for a skipped line.

        After QUIT a silent or reset link also counts as EOF.
        """
        if self.reader is None:
            raise ConnectionIOError("not connected")
        try:
            data = await asyncio.wait_for(
                self.reader.readline(), timeout=self.read_timeout
            )
        except TimeoutError as e:
            if self.state is ConnectionState.QUITTING:
                return None
            raise ConnectionIOError(
                f"no data from server for {self.read_timeout:g}s"
            ) from e
        except ValueError:
            # Limit overrun: the stream discarded the oversized line
            logger.log_event(
                "irc", "line_too_long", level=logging.WARNING, server=self.options.host
            )
            return b""
        except OSError as e:
            if self.state is ConnectionState.QUITTING:
                return None
            raise ConnectionIOError(f"read failed: {e}") from e
        return data or None

    async def _handle_raw(self, raw: bytes) -> None:
        logger.log_event(
            "irc",
            "raw",
            level=logging.DEBUG,
            server=self.options.host,
            raw=raw.rstrip(b"\r\n"),
        )
        try:
            line = parse_message(raw)
        except ParsingError as e:
            logger.log_event(
                "irc",
                "parse_error",
                level=logging.WARNING,
                server=self.options.host,
                error=str(e),
            )
            return
        self._track(line)
        await self._emit(LineReceived(line))

    def _track(self, line: Line) -> None:
        """Protocol housekeeping done before anyone else sees the line."""
        command = line.command
        if isinstance(command, IRCCode):
            if command.code == 1:
                if line.args:
                    self._nick = line.args[0].decode("utf-8", errors="replace")
                self._set_state(ConnectionState.READY)
            elif command.code == 433 and self.state is ConnectionState.REGISTERING:
                self._retry_nick()
            return
        if not isinstance(command, IRCCmd):
            return
        name = command.name.upper()
        if name == "PING":
            self.send_raw(build_line("PONG", *line.args))
        elif name == "ERROR":
            text = line.args[-1].decode("utf-8", errors="replace") if line.args else ""
            logger.log_event(
                "irc",
                "server_error",
                level=logging.WARNING,
                server=self.options.host,
                text=text,
            )
        elif self._is_me(line.prefix):
            if name == "NICK" and line.args:
                self._nick = line.args[0].decode("utf-8", errors="replace")
                self._me = None
            elif name == "JOIN" and line.prefix is not None:
                self._me = line.prefix

    def _retry_nick(self) -> None:
        self._nick_retries += 1
        if self._nick_retries > MAX_NICK_RETRIES:
            raise ProtocolError(
                f"nickname {self.options.nick!r} and alternatives are in use",
                data={"attempts": self._nick_retries},
            )
        self._nick = f"{self._nick}_"
        logger.log_event(
            "irc",
            "nick_in_use",
            level=logging.WARNING,
            server=self.options.host,
            nick=self._nick,
        )
        self.send_raw(build_line("NICK", self._nick))

    def _is_me(self, prefix: User | None) -> bool:
        if prefix is None:
            return False
        return prefix.nick.lower() == self._nick.encode("utf-8").lower()

    async def _emit(self, event: Event) -> None:
        await self.handler(self, event)
        await self.flush()

    async def _execute(self, command: Command) -> None:
        try:
            result = command(self)
            if inspect.isawaitable(result):
                await result
        except IRCError:
            raise
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "command_error",
                level=logging.ERROR,
                server=self.options.host,
                error=str(e),
                error_type=type(e).__name__,
            )
        await self.flush()

    async def _shutdown(self) -> None:
        if self._connected_emitted:
            self._connected_emitted = False
            try:
                await self.handler(self, Disconnected())
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "irc",
                    "disconnect_handler_error",
                    level=logging.ERROR,
                    server=self.options.host,
                    error=str(e),
                )
        if self.writer is not None:
            try:
                self.writer.close()
                await self.writer.wait_closed()
            except OSError as e:
                logger.log_event(
                    "irc",
                    "close_error",
                    level=logging.DEBUG,
                    server=self.options.host,
                    error=str(e),
                )
            finally:
                self.writer = None
                self.reader = None
        self._set_state(ConnectionState.DISCONNECTED)

    async def flush(self) -> None:
        """Drain buffered writes.

        Raises:
            ConnectionIOError: If the transport failed while draining.
        """
        if self.writer is None:
            return
        try:
            await self.writer.drain()
        except OSError as e:
            if self.state is ConnectionState.QUITTING:
                return
            raise ConnectionIOError(f"write failed: {e}") from e

    # Send primitives

    def host(self) -> str:
        return self.options.host

    def me(self) -> User:
        if self._me is not None:
            return self._me
        nick = self._nick.encode("utf-8")
        return User(raw=nick, nick=nick)

    def send_raw(self, line: str | bytes) -> None:
        """Queue one raw line; CRLF is appended when missing."""
        if self.writer is None:
            raise ConnectionIOError("not connected")
        data = to_bytes(line)
        if not data.endswith(b"\r\n"):
            data = data.rstrip(b"\r\n") + b"\r\n"
        self.writer.write(data)

    def join(self, channel: str | bytes, key: str | bytes | None = None) -> None:
        if key:
            self.send_raw(build_line("JOIN", channel, key))
        else:
            self.send_raw(build_line("JOIN", channel))

    def part(self, channel: str | bytes, message: str | bytes | None = None) -> None:
        if message:
            self.send_raw(build_line("PART", channel, message))
        else:
            self.send_raw(build_line("PART", channel))

    def privmsg(self, dst: str | bytes, text: str | bytes) -> None:
        self.send_raw(build_line("PRIVMSG", dst, text))

    def notice(self, dst: str | bytes, text: str | bytes) -> None:
        self.send_raw(build_line("NOTICE", dst, text))

    def action(self, dst: str | bytes, text: str | bytes) -> None:
        self.send_raw(build_line("PRIVMSG", dst, build_ctcp("ACTION", text)))

    def set_nick(self, nick: str | bytes) -> None:
        self.send_raw(build_line("NICK", nick))

    def quit(self, message: str | bytes | None = None) -> None:
        """Send QUIT; the session ends gracefully when the server closes."""
        self._set_state(ConnectionState.QUITTING)
        if message:
            self.send_raw(build_line("QUIT", message))
        else:
            self.send_raw(build_line("QUIT"))
