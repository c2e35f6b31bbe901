"""Staging directory enumeration and descriptor generation."""

from .describe import describe, format_file_details, format_size, render_tree
from .discovery import StagingScanner
from .errors import DescriptorError, MetadataUnavailable, NameUnavailable
from .models import Entry, EntryKind

__all__ = [
    "DescriptorError",
    "Entry",
    "EntryKind",
    "MetadataUnavailable",
    "NameUnavailable",
    "StagingScanner",
    "describe",
    "format_file_details",
    "format_size",
    "render_tree",
]
