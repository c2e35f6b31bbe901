"""Data models for staging-directory entries."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class EntryKind(str, Enum):
    """Kind of filesystem entry found in the staging directory."""

    FILE = "file"
    DIRECTORY = "directory"


class Entry(BaseModel):
    """A file or directory found directly under the staging directory.

    Attributes:
        path: Location of the entry at discovery time.
        kind: Whether the entry is a file or a directory.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: EntryKind

    @property
    def name(self) -> str:
        return self.path.name


__all__ = ["Entry", "EntryKind"]
