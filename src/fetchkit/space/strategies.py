"""Platform strategies for free-space queries.

One strategy per path family:

- ``NativeVolumeStrategy``: OS volume statistics via ``shutil.disk_usage``
  (statvfs on POSIX, GetDiskFreeSpaceEx on Windows drive roots).
- ``NetworkShareStrategy``: UNC shares (``\\\\host\\share``), queried with
  ``cmd /c dir`` and parsed from the summary line.
- ``PosixDfStrategy``: ``df -P``, used only where no native API exists or
  when explicitly preferred.

Strategies are selected once by :func:`select_strategies`.
"""

from __future__ import annotations

import os
import re
import shutil
import sys
from typing import Protocol

from fetchkit.core.subprocess_utils import run_command
from fetchkit.space.parsers import parse_df_output, parse_dir_free_bytes

_DRIVE_PATTERN = re.compile(r"^([A-Za-z]):(?:[\\/]|$)")
_UNC_PATTERN = re.compile(r"^[\\/]{2}([^\\/]+)[\\/]+([^\\/]+)")

DEFAULT_COMMAND_TIMEOUT = 30.0


def drive_root(directory: str) -> str | None:
    """Return ``X:\\`` for a drive-letter path, else None."""
    match = _DRIVE_PATTERN.match(directory)
    if match is None:
        return None
    return f"{match.group(1).upper()}:\\"


def unc_share_root(directory: str) -> str | None:
    """Return ``\\\\host\\share`` for a UNC path, else None."""
    match = _UNC_PATTERN.match(directory)
    if match is None:
        return None
    return f"\\\\{match.group(1)}\\{match.group(2)}"


class SpaceStrategy(Protocol):
    """Protocol for free-space query strategies."""

    name: str

    def supports(self, directory: str) -> bool:
        """Check if this strategy understands the path shape."""
        ...

    def free_bytes(self, directory: str) -> int | None:
        """Query free bytes for the volume backing ``directory``.

        Returns:
            Free bytes, or None if the reading could not be interpreted.

        Raises:
            OSError: If the OS query or external command fails to run.
            subprocess.SubprocessError: If an external command times out.
        """
        ...


class NativeVolumeStrategy:
    """Free space from the OS volume statistics API."""

    name = "native"

    def __init__(self, windows: bool = False) -> None:
        self._windows = windows

    def supports(self, directory: str) -> bool:
        if self._windows:
            return drive_root(directory) is not None
        return bool(directory) and unc_share_root(directory) is None

    def free_bytes(self, directory: str) -> int | None:
        # Query the specific drive root, not whatever cwd happens to be
        target = drive_root(directory) if self._windows else directory
        if target is None:
            return None
        return shutil.disk_usage(target).free


class NetworkShareStrategy:
    """Free space of a UNC share parsed from a ``dir`` listing."""

    name = "network-share"

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT) -> None:
        self._timeout = timeout

    def supports(self, directory: str) -> bool:
        return unc_share_root(directory) is not None

    def free_bytes(self, directory: str) -> int | None:
        share = unc_share_root(directory)
        if share is None:
            return None
        stdout, _, returncode = run_command(
            ["cmd", "/c", "dir", share], timeout=self._timeout
        )
        if returncode != 0:
            return None
        return parse_dir_free_bytes(stdout)


class PosixDfStrategy:
    """Free space from ``df -P``."""

    name = "df"

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT) -> None:
        self._timeout = timeout

    def supports(self, directory: str) -> bool:
        return bool(directory)

    def free_bytes(self, directory: str) -> int | None:
        stdout, _, returncode = run_command(
            ["df", "-P", directory], timeout=self._timeout
        )
        if returncode != 0:
            return None
        return parse_df_output(stdout)


def select_strategies(
    platform: str | None = None,
    prefer_df: bool = False,
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> list[SpaceStrategy]:
    """Choose the strategy chain for a platform.

    Args:
        platform: ``sys.platform`` value; defaults to the running platform.
        prefer_df: On POSIX, use ``df -P`` even if statvfs is available.
        command_timeout: Timeout for external utilities, in seconds.

    Returns:
        Strategies in the order they should be consulted.
    """
    platform = platform or sys.platform
    if platform == "win32":
        return [
            NetworkShareStrategy(timeout=command_timeout),
            NativeVolumeStrategy(windows=True),
        ]
    if prefer_df or not hasattr(os, "statvfs"):
        return [PosixDfStrategy(timeout=command_timeout)]
    return [NativeVolumeStrategy(windows=False)]
