"""Age and pattern based retention sweeps."""

from fetchkit.retention.discovery import iter_matching_files
from fetchkit.retention.models import (
    Candidate,
    IssueKind,
    RetentionRequest,
    SweepIssue,
    SweepResult,
)
from fetchkit.retention.plan import load_sweep_plan, load_sweep_plan_from_dict
from fetchkit.retention.sweeper import RetentionSweeper

__all__ = [
    "Candidate",
    "IssueKind",
    "RetentionRequest",
    "RetentionSweeper",
    "SweepIssue",
    "SweepResult",
    "iter_matching_files",
    "load_sweep_plan",
    "load_sweep_plan_from_dict",
]
