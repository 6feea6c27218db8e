"""Free-space probe.

Every call re-queries the OS; readings are never cached because other
processes change disk state at any time. Check immediately before
committing to a large write.
"""

from __future__ import annotations

import logging
import os
import subprocess  # nosec B404 - only for exception types
from dataclasses import dataclass

from fetchkit.core.formatting import format_megabytes
from fetchkit.exceptions import InsufficientDiskSpaceError
from fetchkit.space.strategies import (
    DEFAULT_COMMAND_TIMEOUT,
    SpaceStrategy,
    select_strategies,
)

logger = logging.getLogger(__name__)

# Returned when the free-space reading is unknown. Not a real capacity.
UNKNOWN_FREE_MB = 9_999_999_999

_BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class SpaceReport:
    """Free capacity of the volume backing ``directory``."""

    directory: str
    free_megabytes: int
    strategy: str | None = None

    @property
    def is_known(self) -> bool:
        """False when ``free_megabytes`` is the unknown sentinel."""
        return self.free_megabytes != UNKNOWN_FREE_MB


class SpaceProbe:
    """Queries free space through a platform strategy chain.

    The chain is selected once at construction. The first strategy that
    supports the path shape answers; if it fails, or no strategy matches,
    the report carries :data:`UNKNOWN_FREE_MB`.
    """

    def __init__(
        self,
        strategies: list[SpaceStrategy] | None = None,
        *,
        platform: str | None = None,
        prefer_df: bool = False,
        command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
    ) -> None:
        if strategies is None:
            strategies = select_strategies(
                platform=platform,
                prefer_df=prefer_df,
                command_timeout=command_timeout,
            )
        self._strategies = list(strategies)

    @property
    def strategies(self) -> list[SpaceStrategy]:
        return list(self._strategies)

    def report(self, directory: str | os.PathLike[str]) -> SpaceReport:
        """Probe free space for ``directory``.

        Never raises for probe failures; they resolve to the sentinel.
        """
        directory = os.fspath(directory)

        strategy = next(
            (s for s in self._strategies if s.supports(directory)), None
        )
        if strategy is None:
            logger.warning(
                "Unrecognized path shape for free-space probe: %r",
                directory,
                extra={"path": directory},
            )
            return SpaceReport(directory, UNKNOWN_FREE_MB)

        try:
            free_bytes = strategy.free_bytes(directory)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.warning(
                "Free-space probe failed for %s (%s): %s",
                directory,
                strategy.name,
                e,
                extra={"path": directory, "strategy": strategy.name},
            )
            return SpaceReport(directory, UNKNOWN_FREE_MB, strategy.name)

        if free_bytes is None or free_bytes < 0:
            logger.warning(
                "Could not interpret free-space reading for %s (%s)",
                directory,
                strategy.name,
                extra={"path": directory, "strategy": strategy.name},
            )
            return SpaceReport(directory, UNKNOWN_FREE_MB, strategy.name)

        return SpaceReport(directory, free_bytes // _BYTES_PER_MB, strategy.name)

    def free_space(self, directory: str | os.PathLike[str]) -> int:
        """Free megabytes for ``directory``, or :data:`UNKNOWN_FREE_MB`."""
        return self.report(directory).free_megabytes

    def has_free_space(
        self, directory: str | os.PathLike[str], required_mb: int
    ) -> bool:
        """Check whether at least ``required_mb`` is free.

        An unknown reading counts as enough space so that a broken probe
        never blocks downloads.
        """
        report = self.report(directory)
        if not report.is_known:
            return True
        return report.free_megabytes >= required_mb

    def ensure_free_space(
        self, directory: str | os.PathLike[str], required_mb: int
    ) -> SpaceReport:
        """Strict pre-flight check before a large write.

        Returns:
            The report used for the decision.

        Raises:
            InsufficientDiskSpaceError: If a known reading is below
                ``required_mb``.
        """
        report = self.report(directory)
        if report.is_known and report.free_megabytes < required_mb:
            raise InsufficientDiskSpaceError(
                f"Insufficient disk space in {report.directory}. "
                f"Required: {format_megabytes(required_mb)}, "
                f"Available: {format_megabytes(report.free_megabytes)}."
            )
        return report


def free_space(directory: str | os.PathLike[str]) -> int:
    """Free megabytes for ``directory`` using the default strategy chain."""
    return SpaceProbe().free_space(directory)
