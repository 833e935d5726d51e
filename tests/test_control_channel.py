from __future__ import annotations

import asyncio
import threading
import time

import pytest

from ircbot.bot.control_channel import ControlChannel, ControlChannelSlot


def _noop(conn):
    return None


def test_empty_slot_drops_command():
    slot = ControlChannelSlot()
    assert slot.current() is None
    assert slot.try_send(_noop, source="test") is False


@pytest.mark.asyncio
async def test_send_from_another_thread_reaches_queue():
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    slot = ControlChannelSlot()
    slot.install(ControlChannel(loop, queue))

    results: list[bool] = []
    t = threading.Thread(target=lambda: results.append(slot.try_send(_noop)))
    t.start()
    t.join(timeout=2)

    assert results == [True]
    assert await asyncio.wait_for(queue.get(), timeout=2) is _noop


@pytest.mark.asyncio
async def test_send_never_blocks_on_a_busy_loop():
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    slot = ControlChannelSlot()
    slot.install(ControlChannel(loop, queue))
    # The loop is busy running this coroutine; the send must still return
    start = time.monotonic()
    for _ in range(100):
        assert slot.try_send(_noop) is True
    assert time.monotonic() - start < 1.0
    await asyncio.sleep(0)
    assert queue.qsize() == 100


def test_closed_loop_reports_failure():
    loop = asyncio.new_event_loop()
    loop.close()
    channel = ControlChannel(loop, asyncio.Queue())
    assert channel.try_send(_noop) is False

    slot = ControlChannelSlot()
    slot.install(channel)
    assert slot.try_send(_noop) is False


def test_clear_empties_slot():
    loop = asyncio.new_event_loop()
    try:
        slot = ControlChannelSlot()
        channel = ControlChannel(loop, asyncio.Queue())
        slot.install(channel)
        assert slot.current() is channel
        slot.clear()
        assert slot.current() is None
    finally:
        loop.close()
