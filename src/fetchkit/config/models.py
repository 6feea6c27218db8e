"""Configuration data models for fetchkit.

Validation of individual values happens in ``__post_init__`` so that an
invalid config file fails loudly at load time. Every failure, including a
value of the wrong type, is reported as ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


def _check_type(name: str, value: object, expected: type | tuple[type, ...]) -> None:
    """Raise ValueError unless ``value`` is an instance of ``expected``.

    ``bool`` is rejected where a number is expected even though it is an
    ``int`` subclass, so ``days = true`` in TOML is not read as 1.
    """
    expected_types = expected if isinstance(expected, tuple) else (expected,)
    wrong_bool = isinstance(value, bool) and bool not in expected_types
    if wrong_bool or not isinstance(value, expected_types):
        names = " or ".join(t.__name__ for t in expected_types)
        raise ValueError(
            f"{name} must be {names}, got {type(value).__name__} {value!r}"
        )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        _check_type("level", self.level, str)
        _check_type("file", self.file, (Path, type(None)))
        _check_type("format", self.format, str)
        _check_type("include_stderr", self.include_stderr, bool)
        _check_type("max_bytes", self.max_bytes, int)
        _check_type("backup_count", self.backup_count, int)
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, "
                f"got {self.format}"
            )
        if self.max_bytes < 0 or self.backup_count < 0:
            raise ValueError("max_bytes and backup_count must be non-negative")


@dataclass
class RetentionConfig:
    """Defaults for retention sweeps."""

    # Days a file is kept before it may be deleted
    days: int = 30

    # Search patterns in parallel
    multithreaded: bool = False

    # Upper bound on search threads
    max_workers: int = 4

    def __post_init__(self) -> None:
        """Validate configuration."""
        _check_type("days", self.days, int)
        _check_type("multithreaded", self.multithreaded, bool)
        _check_type("max_workers", self.max_workers, int)
        if self.days < 0:
            raise ValueError(f"days must be non-negative, got {self.days}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")


@dataclass
class SpaceConfig:
    """Free-space probe settings."""

    # Minimum free megabytes required before starting a download (0 = off)
    min_free_mb: int = 0

    # On POSIX, use `df -P` instead of statvfs
    prefer_df: bool = False

    # Timeout for df/dir invocations, in seconds
    command_timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        _check_type("min_free_mb", self.min_free_mb, int)
        _check_type("prefer_df", self.prefer_df, bool)
        _check_type("command_timeout", self.command_timeout, (int, float))
        if self.min_free_mb < 0:
            raise ValueError(
                f"min_free_mb must be non-negative, got {self.min_free_mb}"
            )
        if self.command_timeout <= 0:
            raise ValueError(
                f"command_timeout must be positive, got {self.command_timeout}"
            )


@dataclass
class FetchkitConfig:
    """Top-level fetchkit configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    retention: RetentionConfig = field(default_factory=RetentionConfig)
    space: SpaceConfig = field(default_factory=SpaceConfig)
