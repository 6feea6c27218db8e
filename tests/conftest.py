"""Shared test fixtures for fetchkit."""

import os
import shutil
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from fetchkit.config.loader import clear_config_cache

SECONDS_PER_DAY = 86400


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep tests away from the user's ~/.fetchkit and FETCHKIT_* variables."""
    for var in list(os.environ):
        if var.startswith("FETCHKIT_"):
            monkeypatch.delenv(var)
    monkeypatch.setenv("FETCHKIT_DATA_DIR", str(tmp_path / "fetchkit-data"))
    clear_config_cache()
    yield
    clear_config_cache()


def _set_age(path: Path, days_old: float, now: float | None = None) -> Path:
    now = time.time() if now is None else now
    timestamp = now - days_old * SECONDS_PER_DAY
    os.utime(path, (timestamp, timestamp))
    return path


@pytest.fixture
def make_aged_file(temp_dir: Path) -> Callable[..., Path]:
    """Factory creating a file under temp_dir with a given age in days."""

    def _make(relative: str, days_old: float, content: bytes = b"data") -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return _set_age(path, days_old)

    return _make


@pytest.fixture
def set_file_age() -> Callable[..., Path]:
    """Return a helper that sets a file's mtime to N days before now."""
    return _set_age
