"""JSON log formatting for fetchkit."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus those WorkerContextFilter adds
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "worker_id", "pattern", "worker_tag"}


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object.

    Lock, probe and sweep messages all pass the affected file as
    ``extra={"path": ...}``; it is promoted to a top-level ``path`` key so
    log consumers can filter on it. Records from parallel searches carry a
    ``worker`` object with the worker slot and pattern. Remaining
    ``extra`` fields go under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        path = getattr(record, "path", None)
        if path is not None:
            entry["path"] = str(path)

        worker_id = getattr(record, "worker_id", None)
        if worker_id:
            entry["worker"] = {
                "id": worker_id,
                "pattern": getattr(record, "pattern", None),
            }

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS
            and key != "path"
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
