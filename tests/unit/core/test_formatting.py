"""Tests for core formatting utilities."""

import pytest

from fetchkit.core.formatting import format_file_size, format_megabytes


class TestFormatFileSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (1536, "1.5 KB"),
            (128 * 1024**2, "128.0 MB"),
            (int(4.2 * 1024**3), "4.2 GB"),
            (2 * 1024**4, "2.0 TB"),
        ],
    )
    def test_sizes(self, size: int, expected: str):
        assert format_file_size(size) == expected


class TestFormatMegabytes:
    def test_megabytes(self):
        assert format_megabytes(200) == "200.0 MB"

    def test_gigabytes(self):
        assert format_megabytes(5120) == "5.0 GB"
