"""Data models for retention sweeps."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class RetentionRequest:
    """One declarative sweep: a root, name globs and a retention period.

    Immutable for the duration of a sweep.
    """

    root_path: Path
    retention_days: int
    conditions: tuple[str, ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        if self.retention_days < 0:
            raise ValueError(
                f"retention_days must be non-negative, got {self.retention_days}"
            )
        # Path("") would silently become the working directory
        if not os.fspath(self.root_path).strip():
            raise ValueError("root_path cannot be empty")
        # A bare string would otherwise split into one pattern per character
        if isinstance(self.conditions, (str, bytes)):
            raise ValueError(
                f"conditions must be a sequence of patterns, got {self.conditions!r}"
            )
        object.__setattr__(self, "root_path", Path(self.root_path))
        object.__setattr__(self, "conditions", tuple(self.conditions))

    @property
    def label(self) -> str:
        return self.name or str(self.root_path)


@dataclass(frozen=True)
class Candidate:
    """A file that matched a pattern and is older than the cutoff."""

    full_path: Path
    last_modified: float
    size_bytes: int = 0


class IssueKind(Enum):
    """Why a candidate or pattern was skipped."""

    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    IO_ERROR = "io_error"
    LOCKED = "locked"
    PATTERN_FAILED = "pattern_failed"


@dataclass(frozen=True)
class SweepIssue:
    """A non-fatal failure recorded during a sweep."""

    kind: IssueKind
    path: Path
    detail: str = ""


@dataclass
class SweepResult:
    """Outcome of a sweep.

    ``deleted`` lists files removed (or, for dry runs, files that would
    have been removed).
    """

    candidates: list[Candidate] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    deleted_bytes: int = 0
    issues: list[SweepIssue] = field(default_factory=list)
    dry_run: bool = False

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def skipped_count(self) -> int:
        return len(self.issues)

    def merge(self, other: SweepResult) -> None:
        """Fold another result into this one (used for multi-sweep plans)."""
        self.candidates.extend(other.candidates)
        self.deleted.extend(other.deleted)
        self.deleted_bytes += other.deleted_bytes
        self.issues.extend(other.issues)
        self.dry_run = self.dry_run or other.dry_run

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "candidate_count": len(self.candidates),
            "deleted_count": self.deleted_count,
            "deleted_bytes": self.deleted_bytes,
            "deleted": [str(path) for path in self.deleted],
            "issues": [
                {
                    "kind": issue.kind.value,
                    "path": str(issue.path),
                    "detail": issue.detail,
                }
                for issue in self.issues
            ],
        }
