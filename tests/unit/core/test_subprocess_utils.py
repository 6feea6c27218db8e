"""Tests for core subprocess utilities."""

import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from fetchkit.core.subprocess_utils import run_command

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX utilities")


class TestRunCommand:
    """Tests for run_command function."""

    @posix_only
    def test_successful_command(self):
        stdout, stderr, returncode = run_command(["echo", "hello"])

        assert stdout.strip() == "hello"
        assert returncode == 0

    @posix_only
    def test_df_on_temp_dir(self, temp_dir: Path):
        """df -P runs against a real directory with Path arguments."""
        stdout, _, returncode = run_command(["df", "-P", temp_dir])

        assert returncode == 0
        assert "Available" in stdout

    @posix_only
    def test_command_failure_returns_non_zero(self):
        _, stderr, returncode = run_command(["ls", "/nonexistent_path_12345"])

        assert returncode != 0
        assert stderr != ""

    def test_missing_executable_raises(self):
        with pytest.raises(FileNotFoundError):
            run_command(["fetchkit-no-such-tool-12345"])

    @patch("fetchkit.core.subprocess_utils.subprocess.run")
    def test_timeout_reraised(self, mock_run: MagicMock):
        mock_run.side_effect = subprocess.TimeoutExpired(["df"], 2)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["df", "-P", "/"], timeout=2)

    @patch("fetchkit.core.subprocess_utils.subprocess.run")
    def test_passes_decoding_and_timeout(self, mock_run: MagicMock):
        mock_run.return_value = MagicMock(stdout=None, stderr=None, returncode=3)

        result = run_command([Path("/usr/bin/df"), "-P"], timeout=7)

        assert result == ("", "", 3)
        mock_run.assert_called_once_with(
            [str(Path("/usr/bin/df")), "-P"],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=7,
        )
