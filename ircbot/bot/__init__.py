"""Bot runtime: supervisor, control channel and input bridges."""

from .console import ConsoleBridge, parse_command  # noqa: F401
from .control_channel import ControlChannel, ControlChannelSlot  # noqa: F401
from .dispatcher import EventDispatcher  # noqa: F401
from .signal_handler import SignalHandler  # noqa: F401
from .supervisor import ConnectionSupervisor, next_backoff  # noqa: F401

__all__ = [
    "ConnectionSupervisor",
    "ConsoleBridge",
    "ControlChannel",
    "ControlChannelSlot",
    "EventDispatcher",
    "SignalHandler",
    "next_backoff",
    "parse_command",
]
