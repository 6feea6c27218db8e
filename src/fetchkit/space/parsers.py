"""Parsers for disk-free utility output.

These are pure functions so they can be tested against recorded output.
Each returns free bytes, or None when the text does not have the expected
shape. They never raise on malformed input.
"""

from __future__ import annotations

import re

# "Filesystem 1024-blocks Used Available Capacity Mounted on"
_DF_BLOCK_SIZE_PATTERN = re.compile(r"(\d+)-blocks", re.IGNORECASE)

# "              3 Dir(s)  123,456,789,012 bytes free"
# German/Dutch consoles print "Bytes frei"; separators vary by locale.
_DIR_FREE_PATTERN = re.compile(
    r"(\d[\d.,'\s\u00a0\u202f]*)\s+bytes\s+(?:free|frei|vrij|libres?)",
    re.IGNORECASE,
)

DEFAULT_DF_BLOCK_SIZE = 1024


def parse_df_output(output: str) -> int | None:
    """Parse ``df -P <dir>`` output into free bytes.

    Skips the header line, splits the first data line on whitespace and
    takes the fourth field (available blocks). The block size is read from
    the header when present ("1024-blocks", "512-blocks"), else 1024.

    Args:
        output: Captured stdout of ``df -P``.

    Returns:
        Available bytes, or None if the output cannot be interpreted.
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if len(lines) < 2:
        return None

    block_size = DEFAULT_DF_BLOCK_SIZE
    match = _DF_BLOCK_SIZE_PATTERN.search(lines[0])
    if match:
        block_size = int(match.group(1))

    fields = lines[1].split()
    if len(fields) < 4:
        return None

    try:
        available_blocks = int(fields[3])
    except ValueError:
        return None

    if available_blocks < 0:
        return None
    return available_blocks * block_size


def parse_dir_free_bytes(output: str) -> int | None:
    """Parse a Windows ``dir`` listing into free bytes.

    Reads the "N bytes free" figure from the last summary line that has
    one, stripping locale thousands separators.

    Args:
        output: Captured stdout of ``cmd /c dir <share>``.

    Returns:
        Free bytes, or None if no summary line is found.
    """
    for line in reversed(output.splitlines()):
        match = _DIR_FREE_PATTERN.search(line)
        if match is None:
            continue
        digits = re.sub(r"\D", "", match.group(1))
        if not digits:
            return None
        return int(digits)
    return None
