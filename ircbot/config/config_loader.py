"""Configuration loading utilities."""

from __future__ import annotations

import logging
import os

from pydantic import ValidationError

from ..constants import DEFAULT_CONFIG_FILE
from ..errors import ConfigError
from ..logs.logger import logger
from .model import BotConfig
from .repository import ConfigRepository


class ConfigLoader:
    """Loads and validates the bot configuration file."""

    def __init__(self, config_file: str | os.PathLike[str] | None = None) -> None:
        self.config_file = str(config_file or DEFAULT_CONFIG_FILE)
        self.repository = ConfigRepository(self.config_file)

    def get_configuration(self) -> BotConfig:
        """Load and validate the configuration.

        Returns:
            The validated BotConfig.

        Raises:
            ConfigError: If the file is missing or fails validation.
        """
        raw = self.repository.load_raw()
        try:
            config = BotConfig.from_dict(raw)
        except ValidationError as e:
            raise ConfigError(
                f"invalid configuration in {self.config_file}: {_summarize(e)}"
            ) from e
        if len(config.servers) > 1:
            logger.log_event(
                "config",
                "extra_servers_ignored",
                level=logging.WARNING,
                count=len(config.servers) - 1,
                server=config.server.host,
            )
        logger.log_event(
            "config",
            "loaded",
            level=logging.DEBUG,
            path=self.config_file,
            server=config.server.host,
        )
        return config


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc}: {item.get('msg')}")
    return "; ".join(parts)


def get_configuration(config_file: str | os.PathLike[str] | None = None) -> BotConfig:
    """Load and validate configuration from ``config_file``."""
    return ConfigLoader(config_file).get_configuration()
