"""Recursive file enumeration for retention sweeps."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def _log_walk_error(error: OSError) -> None:
    logger.debug(
        "Skipping unreadable directory: %s",
        error,
        extra={"path": getattr(error, "filename", None)},
    )


def iter_matching_files(
    root: str | os.PathLike[str], pattern: str
) -> Iterator[Path]:
    """Yield files under ``root`` whose name matches ``pattern``.

    Only regular directory entries listed as files are yielded. Unreadable
    subtrees are skipped rather than aborting the walk, and a missing root
    yields nothing.

    Args:
        root: Directory to walk recursively.
        pattern: fnmatch-style glob applied to the file name.
    """
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        for filename in fnmatch.filter(filenames, pattern):
            yield Path(dirpath) / filename
