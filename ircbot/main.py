#!/usr/bin/env python3
"""
Main entry point for the IRC bot
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from . import __version__
from .bot.console import ConsoleBridge
from .bot.control_channel import ControlChannelSlot
from .bot.dispatcher import EventDispatcher
from .bot.signal_handler import SignalHandler
from .bot.supervisor import ConnectionSupervisor
from .config import BotConfig, get_configuration
from .constants import DEFAULT_CONFIG_FILE
from .errors import ConfigError
from .errors.handling import log_error
from .logging_config import LoggerConfigurator
from .logs.logger import logger
from .scripting.manager import PluginManager
from .scripting.watcher import PluginWatcher

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ircbot",
        description="Scriptable IRC bot with automatic reconnection.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help="path to the JSON configuration file (default: %(default)s)",
    )
    parser.add_argument(
        "--debug", action="store_true", default=None, help="enable debug logging"
    )
    parser.add_argument(
        "--no-console",
        dest="console",
        action="store_false",
        help="do not read commands from stdin",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="validate the configuration and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def main(
    config: BotConfig, *, config_dir: Path | None = None, console: bool = True
) -> int:
    """Wire the bot together and run until it stops.

    Returns:
        The process exit status.
    """
    server = config.server
    slot = ControlChannelSlot()
    plugins = PluginManager(config.plugins, base_dir=config_dir)
    plugins.load_plugins()
    dispatcher = EventDispatcher(server, plugins)
    supervisor = ConnectionSupervisor(server, slot, dispatcher)

    signals = SignalHandler(slot)
    signals.install()

    if console:
        ConsoleBridge(slot, reload_command=plugins.reload_command()).start()

    watcher: PluginWatcher | None = None
    if config.plugins.enabled and config.plugins.watch:
        loop = asyncio.get_running_loop()
        watcher = PluginWatcher(
            plugins.directory, lambda: plugins.request_reload(slot, loop)
        )
        watcher.start()

    logger.log_event(
        "app", "start", server=server.host, port=server.port, nick=server.nick
    )
    try:
        ok = await supervisor.run()
    finally:
        signals.uninstall()
        if watcher is not None:
            watcher.stop()
    return EXIT_OK if ok else EXIT_FAILURE


def run(argv: Sequence[str] | None = None) -> None:
    """Synchronous entry point for the application.

    Raises:
        SystemExit: Always, carrying the exit status.
    """
    args = build_parser().parse_args(argv)
    LoggerConfigurator(debug=args.debug).configure()

    try:
        config = get_configuration(args.config)
    except ConfigError as e:
        log_error("Configuration error", e, {"path": args.config})
        sys.exit(EXIT_USAGE)

    if args.check_config:
        logger.log_event(
            "config",
            "valid",
            path=args.config,
            server=config.server.host,
            channels=len(config.server.autojoin),
        )
        sys.exit(EXIT_OK)

    config_dir = Path(args.config).resolve().parent
    try:
        status = asyncio.run(main(config, config_dir=config_dir, console=args.console))
    except KeyboardInterrupt:
        status = EXIT_OK
    except asyncio.CancelledError:
        status = EXIT_OK
    except Exception as e:
        log_error("Top-level error", e)
        status = EXIT_FAILURE
    finally:
        logging.info("✅ Shutdown complete")
    sys.exit(status)


if __name__ == "__main__":
    run()
