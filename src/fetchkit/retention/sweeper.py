"""Retention sweeps: find files older than a cutoff and delete them.

A sweep runs in two strictly ordered phases:

1. Search - enumerate files matching each name pattern under the root and
   keep those whose mtime is strictly earlier than ``now - retention_days``.
   Patterns are searched sequentially or fanned out across a bounded
   thread pool; both produce the same sorted, de-duplicated candidate set.
2. Delete - remove candidates one at a time. A failure on one file is
   recorded and logged, and the remaining deletions continue.

No deletion starts until the candidate set is complete.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from fetchkit.locking.registry import LockRegistry, LockStatus
from fetchkit.logging.context import worker_context
from fetchkit.retention.discovery import iter_matching_files
from fetchkit.retention.models import (
    Candidate,
    IssueKind,
    RetentionRequest,
    SweepIssue,
    SweepResult,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

DEFAULT_MAX_WORKERS = 4

# Lock outcomes that mean "someone is writing this file, leave it alone"
_LOCK_SKIP_KINDS: dict[LockStatus, IssueKind] = {
    LockStatus.ALREADY_HELD: IssueKind.LOCKED,
    LockStatus.CONTENTION: IssueKind.LOCKED,
    LockStatus.NOT_FOUND: IssueKind.NOT_FOUND,
}


def _stat_candidate(path: Path) -> Candidate | None:
    """Build a Candidate from a path, or None if it cannot be stat'ed."""
    try:
        st = path.stat()
    except OSError as e:
        logger.debug("Cannot stat %s: %s", path, e)
        return None
    return Candidate(
        full_path=path, last_modified=st.st_mtime, size_bytes=st.st_size
    )


class RetentionSweeper:
    """Deletes files that have outlived their retention period.

    Args:
        lock_registry: Registry consulted before each deletion. Files it
            (or another process) holds locked are skipped. Defaults to a
            private registry, so locks held elsewhere are still honored.
        multithreaded: Fan pattern searches out across a thread pool.
        max_workers: Upper bound on search threads.
        dry_run: Report what would be deleted without deleting.
        clock: Returns the current time as epoch seconds.
    """

    def __init__(
        self,
        lock_registry: LockRegistry | None = None,
        *,
        multithreaded: bool = False,
        max_workers: int = DEFAULT_MAX_WORKERS,
        dry_run: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._locks = lock_registry if lock_registry is not None else LockRegistry()
        self._multithreaded = multithreaded
        self._max_workers = max_workers
        self._dry_run = dry_run
        self._clock = clock

    def cutoff(self, retention_days: int) -> float:
        """Epoch seconds before which a file qualifies for deletion."""
        if retention_days < 0:
            raise ValueError(
                f"retention_days must be non-negative, got {retention_days}"
            )
        return self._clock() - retention_days * SECONDS_PER_DAY

    # ------------------------------------------------------------------
    # Declarative mode
    # ------------------------------------------------------------------

    def find_candidates(self, request: RetentionRequest) -> list[Candidate]:
        """Run only the search phase of a declarative sweep."""
        candidates, _ = self._collect(request, self.cutoff(request.retention_days))
        return candidates

    def sweep(self, request: RetentionRequest) -> SweepResult:
        """Sweep ``request.root_path`` for expired files matching its patterns.

        Raises:
            ValueError: If the request has no conditions.
        """
        cutoff = self.cutoff(request.retention_days)
        candidates, issues = self._collect(request, cutoff)

        result = SweepResult(
            candidates=candidates, issues=issues, dry_run=self._dry_run
        )
        self._delete_all(result)

        logger.info(
            "Retention sweep of %s: %d candidate(s), %d deleted, %d skipped",
            request.label,
            len(candidates),
            result.deleted_count,
            result.skipped_count,
            extra={
                "root": str(request.root_path),
                "retention_days": request.retention_days,
                "dry_run": self._dry_run,
            },
        )
        return result

    def _collect(
        self, request: RetentionRequest, cutoff: float
    ) -> tuple[list[Candidate], list[SweepIssue]]:
        if not request.conditions:
            raise ValueError("A declarative sweep needs at least one pattern")

        found: list[Candidate] = []
        issues: list[SweepIssue] = []
        patterns = list(dict.fromkeys(request.conditions))

        if self._multithreaded and len(patterns) > 1:
            workers = min(self._max_workers, len(patterns))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {}
                for idx, pattern in enumerate(patterns, start=1):
                    # Logical slot for log tagging, not the real thread
                    worker_id = f"{((idx - 1) % workers) + 1:02d}"
                    future = executor.submit(
                        self._search_in_worker,
                        worker_id,
                        request.root_path,
                        pattern,
                        cutoff,
                    )
                    futures[future] = pattern

                for future in as_completed(futures):
                    pattern = futures[future]
                    try:
                        found.extend(future.result())
                    except (OSError, ValueError) as e:
                        issues.append(self._pattern_failed(request, pattern, e))
        else:
            for pattern in patterns:
                try:
                    found.extend(
                        self._search_pattern(request.root_path, pattern, cutoff)
                    )
                except (OSError, ValueError) as e:
                    issues.append(self._pattern_failed(request, pattern, e))

        merged = {candidate.full_path: candidate for candidate in found}
        candidates = sorted(merged.values(), key=lambda c: c.full_path)
        return candidates, issues

    def _search_in_worker(
        self, worker_id: str, root: Path, pattern: str, cutoff: float
    ) -> list[Candidate]:
        with worker_context(worker_id, pattern):
            return self._search_pattern(root, pattern, cutoff)

    @staticmethod
    def _search_pattern(root: Path, pattern: str, cutoff: float) -> list[Candidate]:
        matches: list[Candidate] = []
        for path in iter_matching_files(root, pattern):
            candidate = _stat_candidate(path)
            if candidate is not None and candidate.last_modified < cutoff:
                matches.append(candidate)
        logger.debug(
            "Pattern %r matched %d expired file(s) under %s",
            pattern,
            len(matches),
            root,
        )
        return matches

    @staticmethod
    def _pattern_failed(
        request: RetentionRequest, pattern: str, error: Exception
    ) -> SweepIssue:
        logger.warning(
            "Pattern search %r failed under %s: %s",
            pattern,
            request.root_path,
            error,
            extra={"path": str(request.root_path), "glob": pattern},
        )
        return SweepIssue(
            IssueKind.PATTERN_FAILED, request.root_path, f"{pattern}: {error}"
        )

    # ------------------------------------------------------------------
    # Streaming mode
    # ------------------------------------------------------------------

    def sweep_file(
        self, path: str | os.PathLike[str], retention_days: int
    ) -> SweepResult:
        """Evaluate and, if expired, delete one already-resolved file."""
        return self.sweep_files([path], retention_days)

    def sweep_files(
        self, paths: Iterable[str | os.PathLike[str]], retention_days: int
    ) -> SweepResult:
        """Evaluate files supplied by an upstream enumeration.

        The iterable is fully consumed before any deletion starts.
        """
        cutoff = self.cutoff(retention_days)
        result = SweepResult(dry_run=self._dry_run)

        for entry in paths:
            path = Path(entry)
            candidate = _stat_candidate(path)
            if candidate is None:
                self._skip(result, IssueKind.NOT_FOUND, path, "cannot stat file")
                continue
            if candidate.last_modified < cutoff:
                result.candidates.append(candidate)

        self._delete_all(result)
        return result

    # ------------------------------------------------------------------
    # Deletion phase
    # ------------------------------------------------------------------

    def _delete_all(self, result: SweepResult) -> None:
        for candidate in result.candidates:
            self._delete_one(candidate, result)

    def _delete_one(self, candidate: Candidate, result: SweepResult) -> None:
        path = candidate.full_path

        lock = self._locks.probe(path)
        kind = _LOCK_SKIP_KINDS.get(lock.status)
        if kind is not None:
            self._skip(result, kind, path, lock.status.value)
            return

        if self._dry_run:
            logger.info(
                "Would delete expired file: %s", path, extra={"path": str(path)}
            )
            result.deleted.append(path)
            result.deleted_bytes += candidate.size_bytes
            return

        try:
            path.unlink()
        except FileNotFoundError:
            self._skip(result, IssueKind.NOT_FOUND, path, "file vanished")
            return
        except PermissionError as e:
            self._skip(result, IssueKind.PERMISSION, path, str(e))
            return
        except OSError as e:
            self._skip(result, IssueKind.IO_ERROR, path, str(e))
            return

        result.deleted.append(path)
        result.deleted_bytes += candidate.size_bytes
        logger.info("Deleted expired file: %s", path, extra={"path": str(path)})

    @staticmethod
    def _skip(result: SweepResult, kind: IssueKind, path: Path, detail: str) -> None:
        logger.warning(
            "Skipped %s (%s): %s",
            path,
            kind.value,
            detail,
            extra={"path": str(path), "kind": kind.value},
        )
        result.issues.append(SweepIssue(kind, path, detail))
