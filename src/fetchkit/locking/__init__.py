"""Exclusive file locking for in-progress downloads."""

from fetchkit.exceptions import FileLockError
from fetchkit.locking.registry import LockRegistry, LockResult, LockStatus

__all__ = [
    "FileLockError",
    "LockRegistry",
    "LockResult",
    "LockStatus",
]
