"""CLI command for free-space probing."""

from __future__ import annotations

from pathlib import Path

import click

from fetchkit.cli.exit_codes import ExitCode
from fetchkit.cli.output import CommandReport, emit, error_exit
from fetchkit.config import FetchkitConfig
from fetchkit.core.formatting import format_megabytes
from fetchkit.space import SpaceProbe


@click.command("space")
@click.argument("directory", type=click.Path(path_type=Path))
@click.option(
    "--require",
    "-r",
    "required_mb",
    type=click.IntRange(min=0),
    default=None,
    help="Fail unless at least this many MB are free (default from config).",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def space_command(
    ctx: click.Context,
    directory: Path,
    required_mb: int | None,
    json_output: bool,
) -> None:
    """Report free space for the volume backing DIRECTORY."""
    config: FetchkitConfig = ctx.obj["config"]
    if required_mb is None:
        required_mb = config.space.min_free_mb

    probe = SpaceProbe(
        prefer_df=config.space.prefer_df,
        command_timeout=config.space.command_timeout,
    )
    report = probe.report(directory)

    if report.is_known:
        message = (
            f"Free space in {directory}: {format_megabytes(report.free_megabytes)} "
            f"({report.free_megabytes} MB) [{report.strategy}]"
        )
    else:
        message = f"Free space in {directory}: unknown"

    if report.is_known and required_mb and report.free_megabytes < required_mb:
        error_exit(
            f"Only {report.free_megabytes} MB free in {directory}, "
            f"{required_mb} MB required",
            ExitCode.INSUFFICIENT_SPACE,
            json_output,
        )

    emit(
        CommandReport(
            message=message,
            data={
                "directory": report.directory,
                "free_megabytes": report.free_megabytes,
                "known": report.is_known,
                "strategy": report.strategy,
            },
        ),
        json_output,
    )
