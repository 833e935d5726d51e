"""
Configuration constants for the IRC bot

This module contains all tunable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Default config file location (overridden by -c/--config)
DEFAULT_CONFIG_FILE = os.getenv("IRCBOT_CONF_FILE", "ircbot.json")

# Connection timeouts
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 30.0
)  # Seconds allowed for the TCP connect to complete
IRC_READ_TIMEOUT = _get_env_float(
    "IRC_READ_TIMEOUT", 300.0
)  # Seconds of server silence before the link is considered dead
IRC_QUIT_TIMEOUT = _get_env_float(
    "IRC_QUIT_TIMEOUT", 10.0
)  # Seconds to wait for the server to close the link after QUIT

# IRC protocol limits
IRC_STREAM_LIMIT = _get_env_int(
    "IRC_STREAM_LIMIT", 64 * 1024
)  # StreamReader buffer limit for incoming lines

# Reconnect defaults
DEFAULT_RECONNECT_TIME = _get_env_int(
    "DEFAULT_RECONNECT_TIME", 10
)  # Initial reconnect delay when the config does not specify one
RECONNECT_BACKOFF_STEP = _get_env_int(
    "RECONNECT_BACKOFF_STEP", 60
)  # Seconds added per attempt once the backoff table is exhausted

# Plugin hot reload
PLUGIN_RELOAD_DEBOUNCE_SECONDS = _get_env_float(
    "PLUGIN_RELOAD_DEBOUNCE_SECONDS", 1.0
)  # Coalesce bursts of file events into one reload

# Console
CONSOLE_THREAD_NAME = "console"
