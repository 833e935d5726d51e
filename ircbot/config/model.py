from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import DEFAULT_RECONNECT_TIME


class ChannelConfig(BaseModel):
    """A channel joined automatically after registration.

    Attributes:
        name: Channel name including its prefix character (``#``, ``&``...).
        key: Optional channel key.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    key: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name or any(c in name for c in " ,\x07\r\n"):
            raise ValueError(f"invalid channel name: {v!r}")
        return name


class ServerConfig(BaseModel):
    """Connection settings for the (single) IRC server.

    Attributes:
        host: Server hostname.
        port: Server TCP port.
        nick: Nickname to register with.
        user: Username sent in USER; defaults to the nick.
        real: Real name sent in USER; defaults to the nick.
        autojoin: Channels joined after registration, in order.
        reconnect_time: Initial reconnect delay in seconds, None disables reconnecting.
        reconnect_backoff: Whether the delay escalates after each failed attempt.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(default=6667, ge=1, le=65535)
    nick: str = Field(min_length=1)
    user: str | None = None
    real: str | None = None
    autojoin: list[ChannelConfig] = Field(default_factory=list)
    reconnect_time: int | None = Field(default=DEFAULT_RECONNECT_TIME, ge=0)
    reconnect_backoff: bool = True

    @field_validator("nick")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        nick = v.strip()
        if not nick or " " in nick:
            raise ValueError(f"invalid nick: {v!r}")
        return nick

    @field_validator("autojoin", mode="before")
    @classmethod
    def validate_autojoin(cls, v: Any) -> list[Any]:
        """Accept plain channel names as shorthand for ``{"name": ...}``."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("autojoin must be a list")
        return [{"name": item} if isinstance(item, str) else item for item in v]

    @model_validator(mode="after")
    def fill_identity(self) -> ServerConfig:
        # Frozen model: defaults derived from nick are written through __dict__
        if not self.user:
            self.__dict__["user"] = self.nick
        if not self.real:
            self.__dict__["real"] = self.nick
        return self


class PluginConfig(BaseModel):
    """Where plugins come from and how they are reloaded.

    Attributes:
        directory: Directory scanned for ``*.py`` plugin files.
        enabled: Load plugins at all.
        watch: Reload plugins automatically when a file in the directory changes.
        disabled: Plugin names (file stems) to skip.
    """

    model_config = ConfigDict(frozen=True)

    directory: str = "plugins"
    enabled: bool = True
    watch: bool = False
    disabled: list[str] = Field(default_factory=list)


class BotConfig(BaseModel):
    """Top-level configuration file contents."""

    model_config = ConfigDict(frozen=True)

    servers: list[ServerConfig] = Field(min_length=1)
    plugins: PluginConfig = Field(default_factory=PluginConfig)

    @property
    def server(self) -> ServerConfig:
        """The server the bot connects to (only one is supported)."""
        return self.servers[0]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BotConfig:
        """Create a BotConfig from a dictionary.

        A bare server mapping (with ``host`` at the top level) is accepted as
        shorthand for a single-server file.
        """
        norm_data = dict(data)
        if "servers" not in norm_data and "host" in norm_data:
            plugins = norm_data.pop("plugins", None)
            norm_data = {"servers": [norm_data]}
            if plugins is not None:
                norm_data["plugins"] = plugins
        return cls.model_validate(norm_data)
