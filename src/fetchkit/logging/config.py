"""Root logger setup from a LoggingConfig."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from fetchkit.logging.context import WorkerContextFilter
from fetchkit.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from fetchkit.config.models import LoggingConfig

# worker_tag is "[W01:*.log] " inside parallel searches, else ""
TEXT_FORMAT = "%(asctime)s - %(worker_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _make_formatter(fmt: str) -> logging.Formatter:
    if fmt.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Rotating handler for ``config.file``, or None if it cannot be opened."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Logs go to the rotating file when one is configured and can be opened,
    and to stderr when ``include_stderr`` is set or there is no file.
    """
    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config.format)
    context_filter = WorkerContextFilter()

    root = logging.getLogger()
    root.setLevel(logging.getLevelNamesMapping()[config.level.upper()])
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)
