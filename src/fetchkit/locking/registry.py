"""Process-local registry of exclusive file locks.

A writer acquires a lock on its output file before writing so that a
concurrent retention sweep, or another process, cannot act on a
partially-written file. The registry owns every open handle; callers only
ever see a result indicator.

The OS-level lock is tied to the open handle: ``fcntl.flock`` on POSIX,
``msvcrt.locking`` on Windows. Leaking a handle leaks the lock for the
life of the process, so use the registry as a context manager (or call
:meth:`LockRegistry.release_all`) to guarantee cleanup.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO

from fetchkit.exceptions import FileLockError

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)


class LockStatus(Enum):
    """Outcome of a lock acquisition attempt."""

    ACQUIRED = "acquired"
    ALREADY_HELD = "already_held"  # Tracked by this registry
    CONTENTION = "contention"  # Locked by another opener
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class LockResult:
    """Structured result of :meth:`LockRegistry.try_acquire`."""

    path: Path
    status: LockStatus
    detail: str | None = None

    @property
    def held(self) -> bool:
        """True if the registry now holds the lock."""
        return self.status is LockStatus.ACQUIRED


def _normalize(path: str | os.PathLike[str]) -> Path:
    return Path(path).absolute()


def _lock_handle(handle: IO[bytes]) -> None:
    """Apply a non-blocking exclusive lock, raising OSError on contention."""
    if sys.platform == "win32":
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock_handle(handle: IO[bytes]) -> None:
    if sys.platform == "win32":
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


class LockRegistry:
    """Table mapping file paths to open, exclusively locked handles.

    At most one handle per path is held at a time. Table access is
    serialized with a mutex so the registry can be shared between
    worker threads.

    Example:
        with LockRegistry() as locks:
            if locks.acquire(partial_path):
                try:
                    write_chunks(partial_path)
                finally:
                    locks.release(partial_path)
    """

    def __init__(self) -> None:
        self._handles: dict[Path, IO[bytes]] = {}
        self._table_lock = threading.Lock()

    def __enter__(self) -> LockRegistry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release_all()

    def __len__(self) -> int:
        with self._table_lock:
            return len(self._handles)

    def try_acquire(self, path: str | os.PathLike[str]) -> LockResult:
        """Open ``path`` read/write and lock it exclusively.

        The file is never created. No exception propagates; every failure
        is expressed through the returned status.

        Args:
            path: File to lock.

        Returns:
            LockResult describing the outcome.
        """
        key = _normalize(path)
        with self._table_lock:
            if key in self._handles:
                return LockResult(key, LockStatus.ALREADY_HELD)

            try:
                handle = open(key, "r+b")  # noqa: SIM115 - owned by the table
            except FileNotFoundError:
                return LockResult(key, LockStatus.NOT_FOUND)
            except PermissionError as e:
                logger.debug("Cannot open %s for locking: %s", key, e)
                return LockResult(key, LockStatus.PERMISSION, str(e))
            except OSError as e:
                logger.warning(
                    "Cannot open file for locking: %s",
                    e,
                    extra={"path": str(key)},
                )
                return LockResult(key, LockStatus.IO_ERROR, str(e))

            try:
                _lock_handle(handle)
            except OSError as e:
                handle.close()
                logger.debug("File is locked by another opener: %s", key)
                return LockResult(key, LockStatus.CONTENTION, str(e))

            self._handles[key] = handle

        logger.debug("Acquired lock", extra={"path": str(key)})
        return LockResult(key, LockStatus.ACQUIRED)

    def acquire(self, path: str | os.PathLike[str]) -> bool:
        """Acquire an exclusive lock on ``path``.

        Returns:
            True if the lock is now held, False on any failure.
        """
        return self.try_acquire(path).held

    def release(self, path: str | os.PathLike[str]) -> bool:
        """Release the lock on ``path`` if this registry holds it.

        Safe to call defensively and more than once.

        Returns:
            True after closing a tracked handle. For untracked paths,
            True if the path exists on disk and False if it does not.
        """
        key = _normalize(path)
        with self._table_lock:
            handle = self._handles.pop(key, None)

        if handle is None:
            return key.exists()

        self._close(key, handle)
        return True

    def release_all(self) -> int:
        """Release every held lock.

        Returns:
            Number of handles closed.
        """
        with self._table_lock:
            handles = list(self._handles.items())
            self._handles.clear()

        for key, handle in handles:
            self._close(key, handle)
        return len(handles)

    def is_held(self, path: str | os.PathLike[str]) -> bool:
        """True if this registry currently holds a lock on ``path``."""
        with self._table_lock:
            return _normalize(path) in self._handles

    def held_paths(self) -> list[Path]:
        """Snapshot of the paths currently locked by this registry."""
        with self._table_lock:
            return sorted(self._handles)

    def probe(self, path: str | os.PathLike[str]) -> LockResult:
        """Check whether ``path`` could be locked right now.

        Acquires and immediately releases. A path already held by this
        registry reports ALREADY_HELD and is left untouched.
        """
        result = self.try_acquire(path)
        if result.held:
            self.release(result.path)
        return result

    @contextmanager
    def hold(self, path: str | os.PathLike[str]) -> Iterator[Path]:
        """Context manager holding an exclusive lock for the block.

        Yields:
            The normalized path that is locked.

        Raises:
            FileLockError: If the lock cannot be acquired.
        """
        result = self.try_acquire(path)
        if not result.held:
            raise FileLockError(result.path, result.status.value, result.detail)
        try:
            yield result.path
        finally:
            self.release(result.path)

    @staticmethod
    def _close(key: Path, handle: IO[bytes]) -> None:
        try:
            _unlock_handle(handle)
        except OSError as e:
            # Closing the handle drops the lock regardless
            logger.debug("Explicit unlock failed for %s: %s", key, e)
        finally:
            handle.close()
        logger.debug("Released lock", extra={"path": str(key)})
