"""Command factories.

A Command is a callable run on the connection's loop with the live
``IRCConnection``; these helpers build the ones the console and signal
bridges need.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.connection import Command, IRCConnection


def quit_command(message: str | None = None) -> Command:
    def _quit(conn: IRCConnection) -> None:
        conn.quit(message)

    return _quit


def join_command(channel: str, key: str | None = None) -> Command:
    def _join(conn: IRCConnection) -> None:
        conn.join(channel, key)

    return _join


def part_command(channel: str, message: str | None = None) -> Command:
    def _part(conn: IRCConnection) -> None:
        conn.part(channel, message)

    return _part


def privmsg_command(dst: str, text: str) -> Command:
    def _privmsg(conn: IRCConnection) -> None:
        conn.privmsg(dst, text)

    return _privmsg


def notice_command(dst: str, text: str) -> Command:
    def _notice(conn: IRCConnection) -> None:
        conn.notice(dst, text)

    return _notice


def action_command(dst: str, text: str) -> Command:
    def _action(conn: IRCConnection) -> None:
        conn.action(dst, text)

    return _action


def nick_command(nick: str) -> Command:
    def _nick(conn: IRCConnection) -> None:
        conn.set_nick(nick)

    return _nick


def raw_command(line: str) -> Command:
    def _raw(conn: IRCConnection) -> None:
        conn.send_raw(line)

    return _raw
