"""Formatting utilities for human-readable output."""


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes.

    Returns:
        Formatted string (e.g., "4.2 GB", "128.0 MB", "1.5 KB").
    """
    if size_bytes >= 1024**4:
        return f"{size_bytes / (1024**4):.1f} TB"
    elif size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes} B"


def format_megabytes(megabytes: int) -> str:
    """Format a whole-megabyte figure, e.g. 5120 -> "5.0 GB"."""
    return format_file_size(megabytes * 1024 * 1024)
