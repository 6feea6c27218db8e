"""Configuration for fetchkit."""

from fetchkit.config.env import EnvReader
from fetchkit.config.loader import (
    ConfigParseError,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from fetchkit.config.models import (
    FetchkitConfig,
    LoggingConfig,
    RetentionConfig,
    SpaceConfig,
)

__all__ = [
    "ConfigParseError",
    "EnvReader",
    "FetchkitConfig",
    "LoggingConfig",
    "RetentionConfig",
    "SpaceConfig",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
]
