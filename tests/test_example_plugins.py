from __future__ import annotations

from pathlib import Path

import pytest

from ircbot.config.model import PluginConfig
from ircbot.irc.models import IRCCmd, IRCCTCP, Line, LineReceived, User
from ircbot.scripting.manager import PluginManager

PLUGIN_DIR = Path(__file__).resolve().parents[1] / "plugins"
ALICE = User.parse(b"alice!a@example.org")

pytestmark = [pytest.mark.asyncio, pytest.mark.usefixtures("clean_plugin_modules")]


@pytest.fixture
def manager(fake_conn) -> PluginManager:
    manager = PluginManager(PluginConfig(directory=str(PLUGIN_DIR)))
    manager.load_plugins()
    manager.activate(fake_conn)
    return manager


async def test_bundled_plugins_load(manager):
    assert [p.name for p in manager.plugins] == ["ctcp_version", "greeter"]


async def test_greeter_welcomes_others_but_not_itself(manager, fake_conn):
    join = LineReceived(Line(IRCCmd("JOIN"), [b"#chan"], ALICE))
    own = LineReceived(Line(IRCCmd("JOIN"), [b"#chan"], User.parse(b"bot!bot@bot.host")))
    await manager.dispatch_irc_event(fake_conn, join)
    await manager.dispatch_irc_event(fake_conn, own)
    assert fake_conn.sent == [("privmsg", b"#chan", b"Hello, alice!")]


async def test_greeter_answers_ping_in_channel_and_query(manager, fake_conn):
    for dst in (b"#chan", b"bot"):
        event = LineReceived(Line(IRCCmd("PRIVMSG"), [dst, b"!ping"], ALICE))
        await manager.dispatch_irc_event(fake_conn, event)
    assert fake_conn.sent == [
        ("privmsg", b"#chan", b"pong"),
        ("privmsg", b"alice", b"pong"),
    ]


async def test_ctcp_version_reply(manager, fake_conn):
    event = LineReceived(Line(IRCCTCP(b"VERSION", b"bot"), [], ALICE))
    await manager.dispatch_irc_event(fake_conn, event)
    ((kind, dst, text),) = fake_conn.sent
    assert (kind, dst) == ("notice", b"alice")
    assert text.startswith(b"\x01VERSION ircbot")
