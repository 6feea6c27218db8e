"""Structured logging for fetchkit.

Text or JSON output with optional file rotation. Worker context (worker
slot and the pattern being searched) is attached to every record emitted
from parallel retention searches.
"""

from fetchkit.logging.config import configure_logging
from fetchkit.logging.context import (
    WorkerContextFilter,
    clear_worker_context,
    get_worker_context,
    set_worker_context,
    worker_context,
)
from fetchkit.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "WorkerContextFilter",
    "clear_worker_context",
    "configure_logging",
    "get_worker_context",
    "set_worker_context",
    "worker_context",
]
