"""Configuration package exports."""

from .config_loader import ConfigLoader, get_configuration
from .model import BotConfig, ChannelConfig, PluginConfig, ServerConfig
from .repository import ConfigRepository

__all__ = [
    "BotConfig",
    "ChannelConfig",
    "ConfigLoader",
    "ConfigRepository",
    "PluginConfig",
    "ServerConfig",
    "get_configuration",
]
