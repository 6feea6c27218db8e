"""Build a LoggingConfig from config-file values plus CLI overrides."""

from __future__ import annotations

from pathlib import Path

from fetchkit.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return a new LoggingConfig with non-None overrides applied.

    Validation runs via LoggingConfig.__post_init__, so invalid values
    raise ValueError.
    """
    return LoggingConfig(
        level=level if level is not None else base.level,
        file=file if file is not None else base.file,
        format=format if format is not None else base.format,
        include_stderr=(
            include_stderr if include_stderr is not None else base.include_stderr
        ),
        max_bytes=base.max_bytes,
        backup_count=base.backup_count,
    )


def configure_logging_from_cli(
    *,
    config_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
    strict: bool = False,
) -> LoggingConfig:
    """Load config, apply CLI overrides and configure logging.

    Args:
        strict: Raise ConfigParseError on an unparseable config file
            instead of falling back to defaults.

    Returns:
        The LoggingConfig that was applied.
    """
    from fetchkit.config.loader import get_config
    from fetchkit.logging import configure_logging

    config = get_config(config_path=config_path, strict=strict)
    final_config = build_logging_config(
        config.logging,
        level=level,
        file=file,
        format=format,
        include_stderr=include_stderr,
    )
    configure_logging(final_config)
    return final_config
