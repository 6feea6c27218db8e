"""CLI module for fetchkit."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from fetchkit.cli.exit_codes import ExitCode
from fetchkit.cli.output import error_exit
from fetchkit.config import get_config

logger = logging.getLogger(__name__)


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    from fetchkit.config.logging_factory import configure_logging_from_cli

    configure_logging_from_cli(
        config_path=config_path,
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
        strict=True,
    )


@click.group()
@click.version_option(package_name="fetchkit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to config.toml (default: ~/.fetchkit/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """fetchkit - locking, free-space and retention helpers for media downloads."""
    ctx.ensure_object(dict)
    try:
        _configure_logging(config_path, log_level, log_file, log_json)
        # Unparseable config files fail the command
        ctx.obj["config"] = get_config(config_path=config_path, strict=True)
    except ValueError as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)


def _register_commands() -> None:
    from fetchkit.cli.lock import lock_status_command
    from fetchkit.cli.space import space_command
    from fetchkit.cli.sweep import sweep_command

    main.add_command(sweep_command)
    main.add_command(space_command)
    main.add_command(lock_status_command)


_register_commands()
