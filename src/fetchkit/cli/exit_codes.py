"""Exit codes for the fetchkit CLI.

Ranges:
- 0: success
- 1-9: general errors
- 10-19: validation errors
- 20-29: target errors
- 40-49: operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0

    GENERAL_ERROR = 1

    INVALID_ARGUMENTS = 10
    CONFIG_ERROR = 11
    PLAN_VALIDATION_ERROR = 12

    TARGET_NOT_FOUND = 20
    TARGET_LOCKED = 21

    OPERATION_FAILED = 40
    INSUFFICIENT_SPACE = 41
