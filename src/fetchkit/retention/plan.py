"""Sweep plan files.

A sweep plan lists several declarative sweeps in one YAML document::

    sweeps:
      - name: partial downloads
        root: ~/Downloads/media
        patterns: ["*.part", "*.tmp"]
        retention_days: 2
      - root: /srv/media/logs
        patterns: ["*.log"]
        retention_days: 30
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fetchkit.exceptions import SweepPlanError
from fetchkit.retention.models import RetentionRequest


class SweepEntryModel(BaseModel):
    """Pydantic model for one sweep in a plan."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    root: str = Field(min_length=1)
    patterns: list[str] = Field(min_length=1)
    retention_days: int = Field(ge=0)

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Reject blank patterns."""
        for pattern in v:
            if not pattern.strip():
                raise ValueError("patterns cannot contain blank entries")
        return v


class SweepPlanModel(BaseModel):
    """Pydantic model for a whole sweep plan."""

    model_config = ConfigDict(extra="forbid")

    sweeps: list[SweepEntryModel] = Field(min_length=1)


def _format_validation_error(error: ValidationError) -> str:
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Sweep plan validation failed: {loc}: {msg}"
        return f"Sweep plan validation failed: {msg}"
    return f"Sweep plan validation failed: {error}"


def load_sweep_plan_from_dict(data: dict[str, Any]) -> list[RetentionRequest]:
    """Validate plan data and convert it to retention requests.

    Raises:
        SweepPlanError: If the data is invalid.
    """
    try:
        model = SweepPlanModel.model_validate(data)
    except ValidationError as e:
        raise SweepPlanError(_format_validation_error(e)) from e

    return [
        RetentionRequest(
            root_path=Path(entry.root).expanduser(),
            retention_days=entry.retention_days,
            conditions=tuple(entry.patterns),
            name=entry.name,
        )
        for entry in model.sweeps
    ]


def load_sweep_plan(plan_path: Path) -> list[RetentionRequest]:
    """Load and validate a sweep plan from a YAML file.

    Raises:
        FileNotFoundError: If the plan file does not exist.
        SweepPlanError: If the plan is not valid YAML or fails validation.
    """
    if not plan_path.exists():
        raise FileNotFoundError(f"Sweep plan not found: {plan_path}")

    try:
        with open(plan_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SweepPlanError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise SweepPlanError("Sweep plan is empty")
    if not isinstance(data, dict):
        raise SweepPlanError("Sweep plan must be a YAML mapping")

    return load_sweep_plan_from_dict(data)
