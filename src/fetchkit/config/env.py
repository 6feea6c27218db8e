"""Environment variable reader with dependency injection support."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")


class EnvReader:
    """Read typed values from environment variables.

    Accepts an optional mapping in place of ``os.environ`` so tests can
    inject values without touching the process environment. Values that
    fail to parse log a warning and fall back to the default.

    Example:
        reader = EnvReader(env={"FETCHKIT_RETENTION_DAYS": "7"})
        reader.get_int("FETCHKIT_RETENTION_DAYS", 30)  # 7
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Parse a boolean; "true", "1", "yes", "on" are true (any case)."""
        value = self._env.get(var)
        if value is None:
            return default
        return value.lower() in _TRUE_VALUES

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Parse a path with tilde expansion. Existence is not checked."""
        value = self._env.get(var)
        if not value:
            return default
        return Path(value).expanduser()
