from __future__ import annotations

from typing import Any

from ..logging_config import log_structured_error
from .internal import (
    ConfigError,
    ConnectionIOError,
    InternalError,
    NetworkError,
    ParsingError,
    ProtocolError,
    ScriptError,
)


def classify_error(error: BaseException) -> str:
    """Return the aggregation category for an exception."""
    if isinstance(error, ConnectionIOError):
        return "io"
    if isinstance(error, NetworkError | OSError):
        return "network"
    if isinstance(error, ProtocolError):
        return "protocol"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, ScriptError):
        return "script"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: BaseException, context: dict[str, Any] | None = None
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error,
        context=context,
    )
