"""Core utilities package.

Pure helpers shared across fetchkit: external command invocation and
display formatting.
"""

from fetchkit.core.formatting import format_file_size, format_megabytes
from fetchkit.core.subprocess_utils import run_command

__all__ = [
    "format_file_size",
    "format_megabytes",
    "run_command",
]
