from __future__ import annotations

import pytest

from ircbot.errors import NoActiveConnectionError, ScriptArgumentError
from ircbot.scripting.context import ScriptContext
from ircbot.scripting.library import IrcLibrary


@pytest.fixture
def library() -> IrcLibrary:
    return IrcLibrary(ScriptContext("test"))


def _bound(fake_conn) -> IrcLibrary:
    ctx = ScriptContext("test")
    ctx.activate(fake_conn)
    return IrcLibrary(ctx)


def test_event_constants(library):
    assert library.CONNECTED == "-CONNECTED"
    assert library.DISCONNECTED == "-DISCONNECTED"
    assert library.RELOADED == "-RELOADED"
    assert library.ACTION == "-ACTION"
    assert library.CTCP == "-CTCP"
    assert library.CTCPREPLY == "-CTCPREPLY"


@pytest.mark.parametrize(
    "call",
    [
        lambda irc: irc.host(),
        lambda irc: irc.me(),
        lambda irc: irc.privmsg("#c", "hi"),
        lambda irc: irc.notice("#c", "hi"),
    ],
)
def test_connection_calls_fail_when_unbound(library, call):
    with pytest.raises(NoActiveConnectionError):
        call(library)


def test_add_handler_works_without_connection(library):
    library.add_handler(library.CTCP, print)
    assert library._context.has_handlers("-CTCP")


def test_bound_calls_reach_connection(fake_conn):
    irc = _bound(fake_conn)
    assert irc.host() == "irc.test"
    assert irc.me() == {
        "raw": b"bot!bot@bot.host",
        "nick": b"bot",
        "user": b"bot",
        "host": b"bot.host",
    }
    irc.privmsg("#chan", "hello")
    irc.notice(b"alice", b"psst")
    assert fake_conn.sent == [("privmsg", "#chan", "hello"), ("notice", b"alice", b"psst")]


def test_me_returns_a_fresh_dict(fake_conn):
    irc = _bound(fake_conn)
    first = irc.me()
    first["nick"] = b"changed"
    assert irc.me()["nick"] == b"bot"


@pytest.mark.parametrize(("dst", "text"), [(1, "x"), ("#c", None), (["#c"], "x")])
def test_wrong_argument_types_raise_before_connection_check(library, dst, text):
    with pytest.raises(ScriptArgumentError):
        library.privmsg(dst, text)
    with pytest.raises(ScriptArgumentError):
        library.notice(dst, text)


def test_line_injection_is_rejected(fake_conn):
    irc = _bound(fake_conn)
    with pytest.raises(ScriptArgumentError):
        irc.privmsg("#chan", "hi\r\nQUIT :bye")
    assert fake_conn.sent == []


def test_reserved_functions_are_not_exposed(library):
    for name in ("send_raw", "set_nick", "quit", "join"):
        assert not hasattr(library, name)
