"""Plugin discovery, loading, hot reload and per-plugin event dispatch."""

from __future__ import annotations

import asyncio
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

from ..errors import PluginLoadError
from ..logs.logger import logger
from .context import ScriptContext
from .library import IrcLibrary

if TYPE_CHECKING:  # pragma: no cover
    from ..bot.control_channel import ControlChannelSlot
    from ..config.model import PluginConfig
    from ..irc.connection import Command, IRCConnection
    from ..irc.models import Event

_MODULE_PREFIX = "ircbot_plugins"


@dataclass(slots=True)
class Plugin:
    name: str
    path: Path
    module: ModuleType
    context: ScriptContext


class PluginManager:
    """Owns every loaded plugin and its ScriptContext.

    All methods are called from the event loop thread: at startup, from the
    connection's event handler, or from a Command executed by the connection.
    """

    def __init__(self, config: PluginConfig, base_dir: Path | None = None) -> None:
        self.config = config
        directory = Path(config.directory)
        if not directory.is_absolute() and base_dir is not None:
            directory = base_dir / directory
        self.directory = directory
        self.plugins: list[Plugin] = []
        self._conn: IRCConnection | None = None
        self._generation = 0
        self._reload_tasks: set[asyncio.Task[None]] = set()

    def discover(self) -> list[Path]:
        if not self.directory.is_dir():
            logger.log_event(
                "plugin",
                "dir_missing",
                level=logging.WARNING,
                path=str(self.directory),
            )
            return []
        disabled = set(self.config.disabled)
        return [
            path
            for path in sorted(self.directory.glob("*.py"))
            if not path.name.startswith("_") and path.stem not in disabled
        ]

    def load_plugins(self) -> list[Plugin]:
        """Load every plugin in the directory, skipping the ones that fail."""
        self._generation += 1
        self.plugins = []
        if not self.config.enabled:
            logger.log_event("plugin", "disabled", level=logging.DEBUG)
            return self.plugins
        for path in self.discover():
            try:
                self.plugins.append(self._load_plugin(path))
            except PluginLoadError as e:
                logger.log_event(
                    "plugin",
                    "load_failed",
                    level=logging.ERROR,
                    plugin=path.stem,
                    error=str(e),
                )
        logger.log_event("plugin", "loaded", count=len(self.plugins))
        return self.plugins

    def _load_plugin(self, path: Path) -> Plugin:
        name = path.stem
        module_name = f"{_MODULE_PREFIX}.g{self._generation}.{name}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise PluginLoadError(f"cannot import {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        context = ScriptContext(name)
        try:
            spec.loader.exec_module(module)
            setup = getattr(module, "setup", None)
            if not callable(setup):
                raise PluginLoadError(f"{path.name} has no setup(irc) function")
            result = setup(IrcLibrary(context))
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise PluginLoadError(f"{path.name}: setup(irc) must not be async")
        except PluginLoadError:
            sys.modules.pop(module_name, None)
            raise
        except Exception as e:  # noqa: BLE001
            sys.modules.pop(module_name, None)
            raise PluginLoadError(f"{path.name}: {type(e).__name__}: {e}") from e
        logger.log_event("plugin", "load_success", level=logging.DEBUG, plugin=name)
        return Plugin(name=name, path=path, module=module, context=context)

    def _unload_modules(self) -> None:
        for plugin in self.plugins:
            sys.modules.pop(plugin.module.__name__, None)

    # Connection binding

    def activate(self, conn: IRCConnection) -> None:
        self._conn = conn
        for plugin in self.plugins:
            plugin.context.activate(conn)

    def deactivate(self) -> None:
        self._conn = None
        for plugin in self.plugins:
            plugin.context.deactivate()

    # Dispatch

    async def dispatch_irc_event(self, conn: IRCConnection, event: Event) -> None:
        """Hand ``event`` to every plugin; one failing plugin never stops the rest."""
        for plugin in list(self.plugins):
            try:
                await plugin.context.dispatch_event(event)
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "plugin",
                    "dispatch_error",
                    level=logging.ERROR,
                    plugin=plugin.name,
                    server=conn.host(),
                    error=str(e),
                )

    async def reload(self, conn: IRCConnection | None = None) -> None:
        """Drop every plugin, load them again from disk and fire RELOADED."""
        conn = conn if conn is not None else self._conn
        logger.log_event("plugin", "reload_start", count=len(self.plugins))
        self.deactivate()
        self._unload_modules()
        self.load_plugins()
        if conn is not None:
            self.activate(conn)
        for plugin in list(self.plugins):
            try:
                await plugin.context.dispatch_reloaded()
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "plugin",
                    "dispatch_error",
                    level=logging.ERROR,
                    plugin=plugin.name,
                    error=str(e),
                )

    def reload_command(self) -> Command:
        """A Command that reloads plugins on the connection's own loop."""

        def _reload(conn: IRCConnection) -> object:
            return self.reload(conn)

        return _reload

    def request_reload(
        self, slot: ControlChannelSlot, loop: asyncio.AbstractEventLoop
    ) -> None:
        """Reload from any thread.

        The reload runs as a Command on the live connection. With no live
        connection it is scheduled directly on ``loop``.
        """
        if slot.try_send(self.reload_command(), source="watcher"):
            return
        loop.call_soon_threadsafe(self._start_reload)

    def _start_reload(self) -> None:
        task = asyncio.ensure_future(self.reload())
        self._reload_tasks.add(task)
        task.add_done_callback(self._reload_tasks.discard)
