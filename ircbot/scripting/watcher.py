"""
Plugin directory watcher that triggers a hot reload when a script changes
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from typing import Any, Protocol, cast, runtime_checkable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer as _Observer

from ..constants import PLUGIN_RELOAD_DEBOUNCE_SECONDS
from ..logs.logger import logger


class PluginFileHandler(FileSystemEventHandler):
    """Forwards changes to ``*.py`` files in the plugin directory."""

    def __init__(self, watcher_instance: PluginWatcher):
        super().__init__()
        self.watcher = watcher_instance

    def _handle_event(self, src_path: Any) -> None:
        path = os.fsdecode(src_path) if src_path else ""
        name = os.path.basename(path)
        if not name.endswith(".py") or name.startswith(("_", ".")):
            return
        self.watcher.schedule_reload(name)

    def on_modified(self, event):
        if not getattr(event, "is_directory", False):
            self._handle_event(getattr(event, "src_path", ""))

    def on_created(self, event):
        if not getattr(event, "is_directory", False):
            self._handle_event(getattr(event, "src_path", ""))

    def on_deleted(self, event):
        if not getattr(event, "is_directory", False):
            self._handle_event(getattr(event, "src_path", ""))

    def on_moved(self, event):
        dest = getattr(event, "dest_path", None) or getattr(event, "src_path", "")
        self._handle_event(dest)


@runtime_checkable
class _ObserverLike(Protocol):
    def schedule(
        self, handler: FileSystemEventHandler, path: str, recursive: bool = False
    ) -> None: ...  # noqa: D401,E701
    def start(self) -> None: ...  # noqa: D401,E701


class PluginWatcher:
    """Watches the plugin directory and calls ``on_change`` after a quiet period.

    Editors usually write a file in several steps, so bursts of events are
    collapsed into one callback with a ``threading.Timer``. The callback runs
    on the timer thread.
    """

    observer: Any | None
    running: bool

    def __init__(
        self,
        directory: str | os.PathLike[str],
        on_change: Callable[[], Any],
        debounce: float = PLUGIN_RELOAD_DEBOUNCE_SECONDS,
    ):
        self.directory = os.path.abspath(os.fspath(directory))
        self.on_change = on_change
        self.debounce = debounce
        self.observer = None
        self.running = False
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def schedule_reload(self, name: str) -> None:
        logger.log_event("watcher", "change_detected", level=logging.DEBUG, file=name)
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
        try:
            self.on_change()
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "watcher",
                "change_handler_error",
                level=logging.ERROR,
                error=str(e),
            )

    def start(self) -> bool:
        """Start watching; False when the directory is missing or watchdog fails."""
        if self.running:
            return True
        if not os.path.isdir(self.directory):
            logger.log_event(
                "watcher",
                "dir_missing",
                level=logging.WARNING,
                path=self.directory,
            )
            return False
        try:
            observer = cast(_ObserverLike, _Observer())
            observer.schedule(PluginFileHandler(self), self.directory, recursive=False)
            observer.start()
            self.observer = observer
            self.running = True
            logger.log_event("watcher", "start", path=self.directory)
            return True
        except Exception as e:  # noqa: BLE001
            self.observer = None
            logger.log_event(
                "watcher",
                "start_failed",
                level=logging.ERROR,
                error=str(e),
            )
            return False

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        obs = self.observer
        if self.running and obs is not None:
            try:
                obs.stop()
                obs.join()
            finally:
                self.running = False
                self.observer = None
                logger.log_event("watcher", "stopped")
