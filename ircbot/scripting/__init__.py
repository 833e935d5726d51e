"""Plugin scripting layer.

Each plugin gets a ScriptContext holding its handlers and, while a server
connection is up, the handle through which it talks back to the server.
"""

from .context import ScriptContext  # noqa: F401
from .events import (  # noqa: F401
    EVT_ACTION,
    EVT_CONNECTED,
    EVT_CTCP,
    EVT_CTCPREPLY,
    EVT_DISCONNECTED,
    EVT_RELOADED,
    event_arguments,
    event_name,
)
from .library import IrcLibrary  # noqa: F401
from .manager import Plugin, PluginManager  # noqa: F401
from .watcher import PluginWatcher  # noqa: F401

__all__ = [
    "EVT_ACTION",
    "EVT_CONNECTED",
    "EVT_CTCP",
    "EVT_CTCPREPLY",
    "EVT_DISCONNECTED",
    "EVT_RELOADED",
    "IrcLibrary",
    "Plugin",
    "PluginManager",
    "PluginWatcher",
    "ScriptContext",
    "event_arguments",
    "event_name",
]
