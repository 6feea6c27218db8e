"""CLI command for retention sweeps."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from fetchkit.cli.exit_codes import ExitCode
from fetchkit.cli.output import CommandReport, emit, error_exit, report_issues
from fetchkit.config import FetchkitConfig
from fetchkit.core.formatting import format_file_size
from fetchkit.exceptions import SweepPlanError
from fetchkit.locking import LockRegistry
from fetchkit.retention import (
    RetentionRequest,
    RetentionSweeper,
    SweepResult,
    load_sweep_plan,
)

logger = logging.getLogger(__name__)


def _build_requests(
    root: Path | None,
    patterns: tuple[str, ...],
    days: int,
    plan: Path | None,
    json_output: bool,
) -> list[RetentionRequest]:
    if plan is not None:
        if root is not None or patterns:
            error_exit(
                "--plan cannot be combined with ROOT or --pattern",
                ExitCode.INVALID_ARGUMENTS,
                json_output,
            )
        try:
            return load_sweep_plan(plan)
        except FileNotFoundError as e:
            error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
        except SweepPlanError as e:
            error_exit(str(e), ExitCode.PLAN_VALIDATION_ERROR, json_output)

    if root is None:
        error_exit(
            "ROOT is required unless --plan is given",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )
    if not patterns:
        error_exit(
            "At least one --pattern is required",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )
    return [RetentionRequest(root_path=root, retention_days=days, conditions=patterns)]


def _format_summary(result: SweepResult) -> str:
    verb = "Would delete" if result.dry_run else "Deleted"
    lines = [f"{verb}: {path}" for path in result.deleted]
    lines.append(
        f"{verb} {result.deleted_count} file(s) "
        f"({format_file_size(result.deleted_bytes)}), "
        f"skipped {result.skipped_count}"
    )
    return "\n".join(lines)


@click.command("sweep")
@click.argument("root", required=False, type=click.Path(path_type=Path))
@click.option(
    "--pattern",
    "-p",
    "patterns",
    multiple=True,
    help="File name glob to match (repeatable), e.g. '*.part'.",
)
@click.option(
    "--days",
    "-d",
    type=click.IntRange(min=0),
    default=None,
    help="Retention period in days (default from config).",
)
@click.option(
    "--parallel/--sequential",
    default=None,
    help="Search patterns in parallel (default from config).",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum search threads when parallel.",
)
@click.option(
    "--plan",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML sweep plan listing several sweeps.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be deleted.")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def sweep_command(
    ctx: click.Context,
    root: Path | None,
    patterns: tuple[str, ...],
    days: int | None,
    parallel: bool | None,
    workers: int | None,
    plan: Path | None,
    dry_run: bool,
    json_output: bool,
) -> None:
    """Delete files under ROOT older than the retention period.

    Examples:

        # Remove partial downloads older than two days
        fetchkit sweep ~/Downloads -p '*.part' -p '*.tmp' --days 2

        # Preview a multi-directory plan
        fetchkit sweep --plan sweeps.yaml --dry-run
    """
    config: FetchkitConfig = ctx.obj["config"]
    retention_days = days if days is not None else config.retention.days

    requests = _build_requests(root, patterns, retention_days, plan, json_output)

    with LockRegistry() as locks:
        sweeper = RetentionSweeper(
            locks,
            multithreaded=(
                parallel if parallel is not None else config.retention.multithreaded
            ),
            max_workers=workers or config.retention.max_workers,
            dry_run=dry_run,
        )
        total = SweepResult(dry_run=dry_run)
        for request in requests:
            total.merge(sweeper.sweep(request))

    report_issues(total.issues, json_output)
    emit(
        CommandReport(message=_format_summary(total), data=total.to_dict()),
        json_output,
    )
