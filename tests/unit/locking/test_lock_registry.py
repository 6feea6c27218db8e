"""Unit tests for the lock registry."""

import sys
import threading
from pathlib import Path

import pytest

from fetchkit.exceptions import FileLockError
from fetchkit.locking import LockRegistry, LockStatus

posix_only = pytest.mark.skipif(
    sys.platform == "win32", reason="relies on flock semantics"
)


@pytest.fixture
def target(temp_dir: Path) -> Path:
    path = temp_dir / "episode.mkv.part"
    path.write_bytes(b"partial")
    return path


@pytest.fixture
def registry():
    with LockRegistry() as locks:
        yield locks


# =============================================================================
# acquire() / try_acquire()
# =============================================================================


class TestAcquire:
    """Tests for LockRegistry.acquire and try_acquire."""

    def test_acquire_existing_file(self, registry: LockRegistry, target: Path):
        """Should lock an existing file and track it."""
        assert registry.acquire(target) is True
        assert registry.is_held(target)
        assert registry.held_paths() == [target.absolute()]

    def test_acquire_missing_file_returns_false(
        self, registry: LockRegistry, temp_dir: Path
    ):
        """Should return False without creating the file."""
        missing = temp_dir / "missing.part"

        result = registry.try_acquire(missing)

        assert result.held is False
        assert result.status is LockStatus.NOT_FOUND
        assert not missing.exists()

    def test_acquire_twice_in_same_registry(
        self, registry: LockRegistry, target: Path
    ):
        """Second acquire through the same registry reports ALREADY_HELD."""
        assert registry.acquire(target)

        result = registry.try_acquire(target)

        assert result.held is False
        assert result.status is LockStatus.ALREADY_HELD
        assert len(registry) == 1

    @posix_only
    def test_acquire_blocked_by_other_actor(
        self, registry: LockRegistry, target: Path
    ):
        """A second registry cannot lock a file the first one holds."""
        assert registry.acquire(target)

        with LockRegistry() as other:
            result = other.try_acquire(target)

        assert result.held is False
        assert result.status is LockStatus.CONTENTION

    @posix_only
    def test_acquire_succeeds_after_release(
        self, registry: LockRegistry, target: Path
    ):
        """After release, another actor can take the lock."""
        assert registry.acquire(target)
        assert registry.release(target)

        with LockRegistry() as other:
            assert other.acquire(target) is True

    def test_acquire_directory_fails(self, registry: LockRegistry, temp_dir: Path):
        """Directories cannot be opened for locking."""
        result = registry.try_acquire(temp_dir)

        assert result.held is False
        assert result.status in (LockStatus.IO_ERROR, LockStatus.PERMISSION)

    def test_relative_and_absolute_paths_share_entry(
        self,
        registry: LockRegistry,
        target: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Paths are normalized before being used as keys."""
        monkeypatch.chdir(target.parent)
        assert registry.acquire(target.name)

        assert registry.is_held(target)

    def test_concurrent_acquire_single_winner(
        self, registry: LockRegistry, target: Path
    ):
        """Only one of many threads sharing a registry gets the lock."""
        results: list[bool] = []
        results_lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            held = registry.acquire(target)
            with results_lock:
                results.append(held)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1


# =============================================================================
# release()
# =============================================================================


class TestRelease:
    """Tests for LockRegistry.release."""

    def test_release_held_lock(self, registry: LockRegistry, target: Path):
        """Releasing a held lock returns True and untracks it."""
        registry.acquire(target)

        assert registry.release(target) is True
        assert not registry.is_held(target)

    def test_release_missing_path_returns_false(
        self, registry: LockRegistry, temp_dir: Path
    ):
        """Releasing a path that does not exist is a no-op returning False."""
        assert registry.release(temp_dir / "never-existed") is False

    def test_release_unlocked_existing_path_returns_true(
        self, registry: LockRegistry, target: Path
    ):
        """Releasing an existing path that was never locked returns True."""
        assert registry.release(target) is True

    def test_release_is_idempotent(self, registry: LockRegistry, target: Path):
        """Calling release twice is safe."""
        registry.acquire(target)

        assert registry.release(target) is True
        assert registry.release(target) is True
        assert len(registry) == 0

    @posix_only
    def test_release_after_file_deleted(self, registry: LockRegistry, target: Path):
        """A tracked handle is closed even if the file was unlinked."""
        registry.acquire(target)
        target.unlink()

        assert registry.release(target) is True
        assert registry.release(target) is False

    def test_release_all(self, registry: LockRegistry, temp_dir: Path):
        """release_all closes every handle."""
        paths = []
        for name in ("a.part", "b.part", "c.part"):
            path = temp_dir / name
            path.write_bytes(b"x")
            registry.acquire(path)
            paths.append(path)

        assert registry.release_all() == 3
        assert registry.held_paths() == []

    @posix_only
    def test_context_manager_releases_on_exit(self, target: Path):
        """Leaving the with-block releases all locks."""
        with LockRegistry() as locks:
            locks.acquire(target)

        with LockRegistry() as other:
            assert other.acquire(target)


# =============================================================================
# hold() / probe()
# =============================================================================


class TestHold:
    """Tests for the hold() context manager."""

    def test_hold_locks_for_block(self, registry: LockRegistry, target: Path):
        """The path is held inside the block and released after."""
        with registry.hold(target) as locked:
            assert locked == target.absolute()
            assert registry.is_held(target)

        assert not registry.is_held(target)

    def test_hold_releases_on_exception(self, registry: LockRegistry, target: Path):
        """The lock is released when the block raises."""
        with pytest.raises(RuntimeError):
            with registry.hold(target):
                raise RuntimeError("write failed")

        assert not registry.is_held(target)

    def test_hold_missing_file_raises(self, registry: LockRegistry, temp_dir: Path):
        """FileLockError carries the failure kind."""
        with pytest.raises(FileLockError) as exc_info:
            with registry.hold(temp_dir / "missing.part"):
                pass

        assert exc_info.value.kind == "not_found"

    @posix_only
    def test_hold_contended_file_raises(self, registry: LockRegistry, target: Path):
        """FileLockError is raised when another actor holds the file."""
        registry.acquire(target)

        with LockRegistry() as other:
            with pytest.raises(FileLockError, match="contention"):
                with other.hold(target):
                    pass


class TestProbe:
    """Tests for LockRegistry.probe."""

    def test_probe_unlocked_file(self, registry: LockRegistry, target: Path):
        """Probe acquires and releases, leaving nothing held."""
        result = registry.probe(target)

        assert result.held is True
        assert not registry.is_held(target)

    def test_probe_held_file_is_left_held(self, registry: LockRegistry, target: Path):
        """Probing a path this registry holds does not release it."""
        registry.acquire(target)

        result = registry.probe(target)

        assert result.status is LockStatus.ALREADY_HELD
        assert registry.is_held(target)
