import asyncio
import sys

import pytest
import pytest_asyncio

from ircbot.config.model import ServerConfig
from ircbot.irc.models import IRCCmd, Line, LineReceived, User
from ircbot.irc.parser import build_line


class FakeConnection:
    """Stands in for IRCConnection; records what would have been sent."""

    def __init__(self, host: str = "irc.test", nick: bytes = b"bot") -> None:
        self._host = host
        self._me = User(raw=nick + b"!bot@bot.host", nick=nick, user=b"bot", host=b"bot.host")
        self.sent: list[tuple] = []

    def host(self) -> str:
        return self._host

    def me(self) -> User:
        return self._me

    def join(self, channel, key=None):
        build_line("JOIN", channel)
        self.sent.append(("join", channel, key))

    def part(self, channel, message=None):
        self.sent.append(("part", channel, message))

    def privmsg(self, dst, text):
        build_line("PRIVMSG", dst, text)
        self.sent.append(("privmsg", dst, text))

    def notice(self, dst, text):
        build_line("NOTICE", dst, text)
        self.sent.append(("notice", dst, text))

    def quit(self, message=None):
        self.sent.append(("quit", message))


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(
        host="irc.test",
        port=6667,
        nick="bot",
        autojoin=["#one", {"name": "#two", "key": "sekrit"}, "#three"],
        reconnect_time=5,
        reconnect_backoff=True,
    )


@pytest.fixture
def privmsg_event() -> LineReceived:
    line = Line(
        command=IRCCmd("PRIVMSG"),
        args=[b"#chan", b"hello there"],
        prefix=User.parse(b"alice!ali@example.org"),
    )
    return LineReceived(line)


@pytest.fixture
def clean_plugin_modules():
    """Drop plugin modules loaded during a test from sys.modules."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        if name.startswith("ircbot_plugins"):
            sys.modules.pop(name, None)


@pytest_asyncio.fixture
async def irc_server():
    """Start throwaway TCP servers on localhost; yields a starter returning the port."""
    servers: list[asyncio.Server] = []

    async def start(handler) -> int:
        server = await asyncio.start_server(handler, "127.0.0.1", 0)
        servers.append(server)
        return server.sockets[0].getsockname()[1]

    yield start
    for server in servers:
        server.close()
