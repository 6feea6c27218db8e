"""Exception hierarchy for fetchkit.

Per-item failures (a locked file, a vanished candidate, an unreadable
probe) are reported as structured results rather than raised. The
exceptions here are for callers that explicitly ask for strict behavior.
"""


class FetchkitError(Exception):
    """Base exception for fetchkit errors.

    All fetchkit exceptions inherit from this class, allowing callers
    to catch every library error with a single except clause.
    """


class FileLockError(FetchkitError):
    """Error acquiring file lock (file is being written by another actor).

    Attributes:
        path: The file that could not be locked.
        kind: The failure kind reported by the lock registry.
    """

    def __init__(self, path: object, kind: str, detail: str | None = None) -> None:
        self.path = path
        self.kind = kind
        message = f"Cannot lock {path}: {kind}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InsufficientDiskSpaceError(FetchkitError):
    """Raised when there is not enough disk space for the operation."""


class SweepPlanError(FetchkitError):
    """Error loading or validating a sweep plan file."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)
