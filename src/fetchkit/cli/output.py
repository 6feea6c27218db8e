"""Rendering of command results as text or JSON.

Commands build a :class:`CommandReport`. JSON mode prints one object on
stdout; text mode prints the human summary. Errors and per-file skips go
to stderr so JSON stdout stays parseable.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, NoReturn

import click

from fetchkit.cli.exit_codes import ExitCode
from fetchkit.retention.models import SweepIssue


@dataclass
class CommandReport:
    """Outcome of a successful command."""

    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        payload = {"status": "completed", "message": self.message, **self.data}
        return json.dumps(payload, indent=2, default=str)


def emit(report: CommandReport, json_output: bool = False) -> None:
    click.echo(report.to_json() if json_output else report.message)


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Print ``message`` to stderr and exit with ``code``."""
    if json_output:
        payload = {"status": "failed", "error": {"code": code.name, "message": message}}
        click.echo(json.dumps(payload), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def report_issues(issues: Iterable[SweepIssue], json_output: bool = False) -> None:
    """Print one warning line per skipped file.

    Silent in JSON mode, where issues travel in the report data instead.
    """
    if json_output:
        return
    for issue in issues:
        detail = f": {issue.detail}" if issue.detail else ""
        click.echo(
            f"Warning: skipped {issue.path} ({issue.kind.value}){detail}", err=True
        )
