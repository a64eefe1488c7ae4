"""File helpers - extension checks, hidden files, sizes."""

from __future__ import annotations
import os
import stat
from typing import Optional

from .config import IMG_EXTS


def is_supported_image(filepath: str) -> bool:
    """Check if file has a supported image extension."""
    ext = os.path.splitext(filepath)[1].lower()
    return ext in IMG_EXTS


def is_hidden(name: str, st: Optional[os.stat_result] = None) -> bool:
    """Dot-files are hidden everywhere; Windows also has a hidden attribute."""
    if name.startswith("."):
        return True
    attrs = getattr(st, "st_file_attributes", 0) if st is not None else 0
    return bool(attrs & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


def is_readable_file(filepath: str) -> bool:
    """Check that the path is an existing regular file we may read."""
    return os.path.isfile(filepath) and os.access(filepath, os.R_OK)


def get_file_size(filepath: str) -> Optional[int]:
    """File size in bytes, or None if it cannot be read."""
    try:
        return os.path.getsize(filepath)
    except OSError:
        return None


def get_file_size_mb(filepath: str) -> float:
    """Get file size in megabytes."""
    size = get_file_size(filepath)
    return 0.0 if size is None else size / (1024 * 1024)


def format_file_size(num_bytes: int) -> str:
    """Human-readable size using decimal units, as file browsers show it.

    Examples:
        512 -> "512 bytes", 340_000 -> "340 KB", 2_400_000 -> "2.4 MB"
    """
    if num_bytes < 1000:
        return f"{num_bytes} bytes"
    if num_bytes < 1000 ** 2:
        return f"{round(num_bytes / 1000)} KB"
    if num_bytes < 1000 ** 3:
        return f"{num_bytes / 1000 ** 2:.1f} MB"
    return f"{num_bytes / 1000 ** 3:.1f} GB"
