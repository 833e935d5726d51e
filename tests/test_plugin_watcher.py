from __future__ import annotations

import threading
import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from ircbot.scripting.watcher import PluginFileHandler, PluginWatcher


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/plugins/greeter.py", "greeter.py"),
        ("/plugins/_private.py", None),
        ("/plugins/.greeter.py.swp", None),
        ("/plugins/readme.txt", None),
    ],
)
def test_handler_filters_python_files(path, expected):
    watcher = MagicMock()
    handler = PluginFileHandler(watcher)
    handler.on_modified(SimpleNamespace(src_path=path, is_directory=False))
    if expected is None:
        watcher.schedule_reload.assert_not_called()
    else:
        watcher.schedule_reload.assert_called_once_with(expected)


def test_handler_uses_move_destination():
    watcher = MagicMock()
    handler = PluginFileHandler(watcher)
    handler.on_moved(
        SimpleNamespace(src_path="/p/.tmp123", dest_path="/p/a.py", is_directory=False)
    )
    watcher.schedule_reload.assert_called_once_with("a.py")


def test_handler_ignores_directories():
    watcher = MagicMock()
    PluginFileHandler(watcher).on_created(
        SimpleNamespace(src_path="/p/pkg.py", is_directory=True)
    )
    watcher.schedule_reload.assert_not_called()


def test_bursts_are_debounced(tmp_path):
    fired = threading.Event()
    calls: list[int] = []

    def on_change():
        calls.append(1)
        fired.set()

    watcher = PluginWatcher(tmp_path, on_change, debounce=0.05)
    for _ in range(5):
        watcher.schedule_reload("a.py")
    assert fired.wait(2)
    time.sleep(0.2)
    assert calls == [1]


def test_callback_errors_are_logged(tmp_path, caplog):
    caplog.set_level("ERROR")

    def on_change():
        raise RuntimeError("no loop")

    PluginWatcher(tmp_path, on_change)._fire()
    assert any("no loop" in r.message for r in caplog.records)


def test_start_on_missing_directory(tmp_path, caplog):
    caplog.set_level("WARNING")
    watcher = PluginWatcher(tmp_path / "missing", lambda: None)
    assert watcher.start() is False
    assert watcher.running is False


def test_stop_cancels_pending_reload(tmp_path):
    calls: list[int] = []
    watcher = PluginWatcher(tmp_path, lambda: calls.append(1), debounce=0.1)
    watcher.schedule_reload("a.py")
    watcher.stop()
    time.sleep(0.3)
    assert calls == []


def test_file_change_triggers_callback(tmp_path):
    fired = threading.Event()
    watcher = PluginWatcher(tmp_path, fired.set, debounce=0.05)
    assert watcher.start() is True
    try:
        (tmp_path / "new_plugin.py").write_text("def setup(irc):\n    pass\n")
        assert fired.wait(5), "watchdog did not report the new plugin file"
    finally:
        watcher.stop()
    assert watcher.running is False
