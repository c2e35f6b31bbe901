"""Descriptor generation for staging entries.

A descriptor is the short text handed to the classifier. Directories are
rendered as a one-level tree of their children; files are summarized by name,
size, and timestamps.
"""

from __future__ import annotations

import math
import os
import stat
from datetime import datetime
from pathlib import Path

from .errors import MetadataUnavailable, NameUnavailable

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TREE_GLYPH = "└── "
INDENT = "    "


def describe(path: Path) -> str:
    """Return the descriptor for a file or directory.

    Args:
        path: Entry to describe; must exist at call time.

    Returns:
        str: Tree rendering for directories, a metadata line for files.

    Raises:
        NameUnavailable: If the path has no final component.
        MetadataUnavailable: If the entry metadata cannot be read.
    """
    info = _stat(path)
    if stat.S_ISDIR(info.st_mode):
        return render_tree(path)
    return format_file_details(path, info)


def render_tree(path: Path) -> str:
    """Render a directory and its immediate children as an indented tree.

    Grandchildren are never listed. Children follow filesystem order.
    """
    name = _entry_name(path)
    lines = [_tree_line(0, name)]
    try:
        with os.scandir(path) as iterator:
            for child in iterator:
                lines.append(_tree_line(1, child.name))
    except OSError as exc:
        raise MetadataUnavailable(f"Cannot list directory {path}: {exc}") from exc
    return "\n".join(lines)


def format_file_details(path: Path, info: os.stat_result | None = None) -> str:
    """Summarize a file as name, size metric, creation and modification times."""
    name = _entry_name(path)
    if info is None:
        info = _stat(path)

    created_ts = getattr(info, "st_birthtime", None)
    if created_ts is None:
        created_ts = info.st_ctime

    return (
        f"File name: {name}, "
        f"file size: {format_size(info.st_size)} KB, "
        f"created: {format_timestamp(created_ts)}, "
        f"modified: {format_timestamp(info.st_mtime)}"
    )


def format_size(size_bytes: int) -> str:
    """Return the size metric ``round(bytes / 1024) / 100`` as display text.

    The value is rounded half up to whole kilobytes first and then divided by 100.
    Integral values are shown without a fractional part (204800 -> ``2``).
    """
    # half-up rounding, not Python's banker's rounding
    value = math.floor(size_bytes / 1024 + 0.5) / 100
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_timestamp(timestamp: float) -> str:
    """Format a POSIX timestamp in local time as ``YYYY-MM-DD HH:MM:SS``."""
    try:
        return datetime.fromtimestamp(timestamp).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError) as exc:
        raise MetadataUnavailable(f"Unrepresentable timestamp {timestamp!r}") from exc


def _stat(path: Path) -> os.stat_result:
    try:
        return path.stat()
    except OSError as exc:
        raise MetadataUnavailable(f"Cannot read metadata for {path}: {exc}") from exc


def _entry_name(path: Path) -> str:
    name = path.name
    if not name:
        raise NameUnavailable(f"Path has no final component: {path}")
    return name


def _tree_line(depth: int, name: str) -> str:
    return f"{INDENT * depth}{TREE_GLYPH}{name}"


__all__ = [
    "describe",
    "format_file_details",
    "format_size",
    "format_timestamp",
    "render_tree",
]
