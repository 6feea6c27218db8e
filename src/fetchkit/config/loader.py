"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (FETCHKIT_*)
3. Config file (~/.fetchkit/config.toml)
4. Default values

Environment variables:
- FETCHKIT_CONFIG_PATH: Path to config file (overrides default location)
- FETCHKIT_DATA_DIR: Path to data directory (overrides ~/.fetchkit/)
- FETCHKIT_LOG_LEVEL: Log level
- FETCHKIT_LOG_FILE: Log file path
- FETCHKIT_RETENTION_DAYS: Default retention period in days
- FETCHKIT_MULTITHREADED: Search patterns in parallel (true/false)
- FETCHKIT_RETENTION_WORKERS: Maximum search threads
- FETCHKIT_MIN_FREE_MB: Minimum free space before downloading
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from fetchkit.config.env import EnvReader
from fetchkit.config.models import (
    FetchkitConfig,
    LoggingConfig,
    RetentionConfig,
    SpaceConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".fetchkit"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# path -> (parsed dict, mtime); reloaded automatically when the file changes
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigParseError(ValueError):
    """Raised in strict mode when the config file cannot be parsed."""


def get_data_dir() -> Path:
    """Get the fetchkit data directory (``FETCHKIT_DATA_DIR`` or ~/.fetchkit)."""
    env_path = os.environ.get("FETCHKIT_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_DIR


def get_default_config_path() -> Path:
    """Get the config file path, honoring ``FETCHKIT_CONFIG_PATH``."""
    env_path = os.environ.get("FETCHKIT_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    if os.environ.get("FETCHKIT_DATA_DIR"):
        return get_data_dir() / "config.toml"
    return DEFAULT_CONFIG_FILE


def load_config_file(
    config_path: Path | None = None, *, strict: bool = False
) -> dict[str, Any]:
    """Load and cache the TOML config file.

    Args:
        config_path: Explicit path; defaults to get_default_config_path().
        strict: Raise ConfigParseError instead of returning {} on bad TOML.

    Returns:
        Parsed config dict, or {} if the file is missing or unreadable.
    """
    path = config_path or get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        return {}
    except OSError as e:
        logger.warning("Cannot read config file %s: %s", path, e)
        return {}

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        try:
            with path.open("rb") as f:
                result = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            if strict:
                raise ConfigParseError(f"Invalid TOML in {path}: {e}") from e
            logger.warning("Ignoring unparseable config file %s: %s", path, e)
            return {}
        except OSError as e:
            logger.warning("Cannot read config file %s: %s", path, e)
            return {}

        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config file table, or {} if absent."""
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _file_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"file must be a path string, got {type(value).__name__}")
    return Path(value).expanduser()


def get_config(
    config_path: Path | None = None,
    *,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    retention_days: int | None = None,
    multithreaded: bool | None = None,
    max_workers: int | None = None,
    env_reader: EnvReader | None = None,
    strict: bool = False,
) -> FetchkitConfig:
    """Get configuration with full precedence handling.

    Keyword arguments are CLI overrides and win over everything else.

    Args:
        config_path: Path to config file (overrides FETCHKIT_CONFIG_PATH).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: Raise ConfigParseError on an unparseable config file.

    Returns:
        Merged FetchkitConfig.

    Raises:
        ValueError: If a merged value fails validation.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    logging_section = _section(file_config, "logging")
    retention_file = _section(file_config, "retention")
    space_file = _section(file_config, "space")

    defaults = FetchkitConfig()

    logging_config = LoggingConfig(
        level=_first(
            log_level,
            reader.get_str("FETCHKIT_LOG_LEVEL"),
            logging_section.get("level"),
            defaults.logging.level,
        ),
        file=_first(
            log_file,
            reader.get_path("FETCHKIT_LOG_FILE"),
            _file_path(logging_section.get("file")),
        ),
        format=_first(
            log_format, logging_section.get("format"), defaults.logging.format
        ),
        include_stderr=_first(
            logging_section.get("include_stderr"), defaults.logging.include_stderr
        ),
        max_bytes=_first(logging_section.get("max_bytes"), defaults.logging.max_bytes),
        backup_count=_first(
            logging_section.get("backup_count"), defaults.logging.backup_count
        ),
    )

    retention_config = RetentionConfig(
        days=_first(
            retention_days,
            reader.get_int("FETCHKIT_RETENTION_DAYS"),
            retention_file.get("days"),
            defaults.retention.days,
        ),
        multithreaded=_first(
            multithreaded,
            reader.get_bool("FETCHKIT_MULTITHREADED"),
            retention_file.get("multithreaded"),
            defaults.retention.multithreaded,
        ),
        max_workers=_first(
            max_workers,
            reader.get_int("FETCHKIT_RETENTION_WORKERS"),
            retention_file.get("max_workers"),
            defaults.retention.max_workers,
        ),
    )

    space_config = SpaceConfig(
        min_free_mb=_first(
            reader.get_int("FETCHKIT_MIN_FREE_MB"),
            space_file.get("min_free_mb"),
            defaults.space.min_free_mb,
        ),
        prefer_df=_first(space_file.get("prefer_df"), defaults.space.prefer_df),
        command_timeout=_first(
            space_file.get("command_timeout"), defaults.space.command_timeout
        ),
    )

    return FetchkitConfig(
        logging=logging_config,
        retention=retention_config,
        space=space_config,
    )
