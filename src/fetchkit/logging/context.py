"""Worker context for structured logging.

Propagates the worker slot and current search pattern through contextvars
so parallel retention searches produce attributable log lines.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_worker_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "worker_id", default=None
)
_pattern: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "pattern", default=None
)


def set_worker_context(worker_id: str, pattern: str | None = None) -> None:
    """Set the current worker context.

    Args:
        worker_id: Worker slot (e.g., "01", "02").
        pattern: Name glob the worker is searching, if any.
    """
    _worker_id.set(worker_id)
    _pattern.set(pattern)


def clear_worker_context() -> None:
    """Clear the current worker context."""
    _worker_id.set(None)
    _pattern.set(None)


@contextmanager
def worker_context(
    worker_id: str, pattern: str | None = None
) -> Generator[None, None, None]:
    """Set worker context for the block and restore the previous one after.

    Example:
        with worker_context("01", "*.part"):
            logger.info("Searching")  # tagged [W01:*.part]
    """
    old_worker_id = _worker_id.get()
    old_pattern = _pattern.get()
    try:
        set_worker_context(worker_id, pattern)
        yield
    finally:
        _worker_id.set(old_worker_id)
        _pattern.set(old_pattern)


def get_worker_context() -> tuple[str | None, str | None]:
    """Return (worker_id, pattern); either may be None."""
    return _worker_id.get(), _pattern.get()


class WorkerContextFilter(logging.Filter):
    """Inject worker context into log records.

    Adds ``worker_id`` and ``pattern`` attributes, plus a compact
    ``worker_tag`` such as ``[W01:*.log] `` for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        worker_id, pattern = get_worker_context()

        record.worker_id = worker_id
        record.pattern = pattern

        if worker_id:
            if pattern:
                record.worker_tag = f"[W{worker_id}:{pattern}] "
            else:
                record.worker_tag = f"[W{worker_id}] "
        else:
            record.worker_tag = ""

        return True
