from __future__ import annotations

import asyncio
import signal
from unittest.mock import MagicMock

import pytest

from ircbot.bot.control_channel import ControlChannel, ControlChannelSlot
from ircbot.bot.signal_handler import SignalHandler


def test_install_registers_on_loop():
    loop = MagicMock()
    handler = SignalHandler(ControlChannelSlot())
    assert handler.install(loop) is True
    loop.add_signal_handler.assert_called_once_with(signal.SIGINT, handler._on_signal)


def test_first_signal_sends_one_quit_and_uninstalls():
    loop = MagicMock()
    loop.is_closed.return_value = False
    slot = MagicMock(spec=ControlChannelSlot)
    handler = SignalHandler(slot)
    handler.install(loop)

    handler._on_signal()
    handler._on_signal()

    assert handler.fired is True
    assert slot.try_send.call_count == 1
    loop.remove_signal_handler.assert_called_once_with(signal.SIGINT)


def test_signal_with_empty_slot_is_dropped_quietly():
    loop = MagicMock()
    loop.is_closed.return_value = False
    handler = SignalHandler(ControlChannelSlot())
    handler.install(loop)
    handler._on_signal()
    assert handler.fired is True


def test_install_failure_warns_and_stays_inert(caplog):
    caplog.set_level("WARNING")
    loop = MagicMock()
    loop.add_signal_handler.side_effect = NotImplementedError
    handler = SignalHandler(ControlChannelSlot())
    assert handler.install(loop) is False
    assert any("Cannot handle SIGINT" in r.message for r in caplog.records)
    handler.uninstall()
    loop.remove_signal_handler.assert_not_called()


@pytest.mark.asyncio
async def test_quit_command_reaches_live_connection():
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    slot = ControlChannelSlot()
    slot.install(ControlChannel(loop, queue))
    handler = SignalHandler(slot)
    assert handler.install() is True
    try:
        handler._on_signal()
        command = await asyncio.wait_for(queue.get(), timeout=2)
    finally:
        handler.uninstall()

    conn = MagicMock()
    command(conn)
    conn.quit.assert_called_once_with(None)
    # Handler was removed after firing
    assert loop.remove_signal_handler(signal.SIGINT) is False
