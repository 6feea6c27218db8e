"""Subprocess utilities for external tool invocation.

Free-space probes shell out to platform utilities (``df``, ``cmd /c dir``).
This wrapper keeps timeout handling, decoding and logging consistent.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - needed for df/dir probes
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: float = 30,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run external command with standard error handling.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds (default 30).
        errors: Error handling mode for text decoding (default "replace").
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If command times out. subprocess.run()
            kills the child before raising.
        FileNotFoundError: If the executable does not exist.
    """
    str_args = [str(arg) for arg in args]
    command_name = str_args[0].split("/")[-1] if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()

    try:
        result = subprocess.run(  # nosec B603 - caller builds args
            str_args,
            capture_output=True,
            text=True,
            errors=errors,
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        elapsed = time.monotonic() - start_time
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={
                "command": command_name,
                "timeout_seconds": timeout,
                "elapsed_seconds": round(elapsed, 3),
            },
        )
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode
