"""CLI command for inspecting file locks."""

from __future__ import annotations

from pathlib import Path

import click

from fetchkit.cli.exit_codes import ExitCode
from fetchkit.cli.output import CommandReport, emit, error_exit
from fetchkit.locking import LockRegistry, LockStatus

_STATUS_EXIT_CODES = {
    LockStatus.CONTENTION: ExitCode.TARGET_LOCKED,
    LockStatus.NOT_FOUND: ExitCode.TARGET_NOT_FOUND,
    LockStatus.PERMISSION: ExitCode.OPERATION_FAILED,
    LockStatus.IO_ERROR: ExitCode.OPERATION_FAILED,
}


@click.command("lock-status")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
def lock_status_command(path: Path, json_output: bool) -> None:
    """Check whether PATH is currently locked by another writer.

    Exits 0 when the file could be locked (nobody is writing it).
    """
    with LockRegistry() as locks:
        result = locks.probe(path)

    if result.held:
        emit(
            CommandReport(
                message=f"{result.path}: not locked",
                data={"path": str(result.path), "locked": False},
            ),
            json_output,
        )
        return

    code = _STATUS_EXIT_CODES.get(result.status, ExitCode.GENERAL_ERROR)
    if result.status is LockStatus.CONTENTION:
        message = f"{result.path}: locked by another writer"
    else:
        message = f"{result.path}: {result.status.value}"
        if result.detail:
            message = f"{message} ({result.detail})"
    error_exit(message, code, json_output)
