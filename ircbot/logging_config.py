r"""
Logging configuration module for the IRC bot.

Provides the colorlog-based root handler and structured error logging with a
small in-process aggregator that reports error counts at shutdown.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import defaultdict
from typing import Any

import colorlog


class ErrorAggregator:
    """Counts error occurrences per category for the shutdown summary."""

    def __init__(self) -> None:
        self.errors: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.lock = threading.Lock()

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        with self.lock:
            self.errors[error_type].append(
                {"timestamp": time.time(), "message": message, "context": context or {}}
            )
            # Keep only recent errors (last 100 per type)
            if len(self.errors[error_type]) > 100:
                self.errors[error_type] = self.errors[error_type][-100:]

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        with self.lock:
            return {
                error_type: {
                    "total_count": len(occurrences),
                    "last_message": occurrences[-1]["message"] if occurrences else None,
                }
                for error_type, occurrences in self.errors.items()
            }

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            return
        logging.warning("🚨 Error summary")
        for error_type, stats in summary.items():
            logging.warning(
                f"  {error_type}: {stats['total_count']} total, last: {stats['last_message']}"
            )


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context and record it in the aggregator.

    Args:
        error_type: Category of the error (e.g., 'network', 'protocol', 'script')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"
    if exception is not None:
        structured_message += f" | Exception: {type(exception).__name__}: {exception}"
    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.log(level, structured_message)
    error_aggregator.record_error(error_type, message, context)


class LoggerConfigurator:
    """Configures the root logger with colored console output.

    Uses the DEBUG environment variable ('true', '1' or 'yes') unless a level
    is forced by the caller (the --debug CLI flag).
    """

    def __init__(self, debug: bool | None = None) -> None:
        self.debug = debug

    def _resolve_level(self) -> int:
        if self.debug is not None:
            return logging.DEBUG if self.debug else logging.INFO
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> int:
        """Install the colored handler on the root logger and return the level."""
        log_level = self._resolve_level()
        if log_level == logging.DEBUG:
            # BotLogger reads DEBUG to pick its verbose layout
            os.environ["DEBUG"] = "true"

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(self.build_formatter())

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)
        logging.getLogger("ircbot").setLevel(log_level)

        # watchdog is chatty at debug level
        logging.getLogger("watchdog").setLevel(logging.INFO)

        atexit.register(self._log_final_error_summary)
        return log_level

    @staticmethod
    def _log_final_error_summary() -> None:
        error_aggregator.log_summary_report()
