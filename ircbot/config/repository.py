from __future__ import annotations

import json
import logging
import os
from typing import Any

from ..errors import ConfigError


class ConfigRepository:
    """Reads the JSON configuration file.

    Caches the parsed document keyed on the file's mtime and size so repeated
    loads (e.g. from --check-config followed by startup) skip the disk.
    """

    def __init__(self, path: str | os.PathLike[str]):
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)
        self._file_mtime: float | None = None
        self._file_size: int | None = None
        self._cached: dict[str, Any] | None = None

    def load_raw(self) -> dict[str, Any]:
        """Load the raw configuration mapping.

        Raises:
            ConfigError: If the file is missing, unreadable or not a JSON object.
        """
        try:
            st = os.stat(self.path)
        except FileNotFoundError as e:
            raise ConfigError(f"configuration file not found: {self.path}") from e
        if (
            self._cached is not None
            and self._file_mtime == st.st_mtime
            and self._file_size == st.st_size
        ):
            return self._cached
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.error(f"Configuration load error: {e}")
            raise ConfigError(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{self.path}: top level must be a JSON object")
        self._cached = data
        self._file_mtime = st.st_mtime
        self._file_size = st.st_size
        return data
