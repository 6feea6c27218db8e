"""Unit tests for df/dir output parsers against recorded samples."""

from fetchkit.space.parsers import parse_df_output, parse_dir_free_bytes

GNU_DF_OUTPUT = """\
Filesystem     1024-blocks      Used Available Capacity Mounted on
/dev/nvme0n1p2   490617784 301554332 164067668      65% /
"""

MACOS_DF_OUTPUT = """\
Filesystem   512-blocks      Used Available Capacity  Mounted on
/dev/disk3s5  965595304 688152264 255081880    73%    /System/Volumes/Data
"""

WINDOWS_DIR_OUTPUT = """\
 Volume in drive \\\\nas\\media is Media
 Volume Serial Number is 1A2B-3C4D

 Directory of \\\\nas\\media

04/02/2024  10:15 AM    <DIR>          .
04/02/2024  10:15 AM    <DIR>          shows
03/28/2024  08:01 PM         1,048,576 notes.txt
               1 File(s)      1,048,576 bytes
               2 Dir(s)  5,368,709,120 bytes free
"""

GERMAN_DIR_OUTPUT = """\
 Verzeichnis von \\\\nas\\media

               1 Datei(en),      1.048.576 Bytes
               2 Verzeichnis(se), 5.368.709.120 Bytes frei
"""


class TestParseDfOutput:
    """Tests for parse_df_output."""

    def test_gnu_output(self) -> None:
        """Fourth field times 1024."""
        assert parse_df_output(GNU_DF_OUTPUT) == 164067668 * 1024

    def test_block_size_read_from_header(self) -> None:
        """512-block output is scaled by the header block size."""
        assert parse_df_output(MACOS_DF_OUTPUT) == 255081880 * 512

    def test_header_only_returns_none(self) -> None:
        header = GNU_DF_OUTPUT.splitlines()[0]
        assert parse_df_output(header) is None

    def test_empty_output_returns_none(self) -> None:
        assert parse_df_output("") is None

    def test_too_few_fields_returns_none(self) -> None:
        output = "Filesystem 1024-blocks Used Available\n/dev/sda1 100 50\n"
        assert parse_df_output(output) is None

    def test_non_numeric_field_returns_none(self) -> None:
        output = "Filesystem 1024-blocks Used Available\n/dev/sda1 100 50 lots 5% /\n"
        assert parse_df_output(output) is None

    def test_negative_available_returns_none(self) -> None:
        output = "Filesystem 1024-blocks Used Available\n/dev/sda1 100 150 -50 150% /\n"
        assert parse_df_output(output) is None

    def test_missing_block_size_defaults_to_1024(self) -> None:
        output = "Filesystem Blocks Used Available\n/dev/sda1 100 50 50 50% /\n"
        assert parse_df_output(output) == 50 * 1024


class TestParseDirFreeBytes:
    """Tests for parse_dir_free_bytes."""

    def test_english_summary_line(self) -> None:
        assert parse_dir_free_bytes(WINDOWS_DIR_OUTPUT) == 5_368_709_120

    def test_file_total_line_is_not_free_space(self) -> None:
        """Only the 'bytes free' line counts, not the file size total."""
        output = "               1 File(s)      1,048,576 bytes\n"
        assert parse_dir_free_bytes(output) is None

    def test_german_separators(self) -> None:
        assert parse_dir_free_bytes(GERMAN_DIR_OUTPUT) == 5_368_709_120

    def test_no_summary_returns_none(self) -> None:
        assert parse_dir_free_bytes("Access is denied.\n") is None

    def test_empty_output_returns_none(self) -> None:
        assert parse_dir_free_bytes("") is None
