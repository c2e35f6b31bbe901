"""Staging directory enumeration."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from .models import Entry, EntryKind

LOGGER = logging.getLogger(__name__)


class StagingScanner:
    """Discover the immediate children of a staging directory.

    Entries that are a configured destination directory, or that contain one,
    are skipped so already-sorted content is never reprocessed.
    """

    def __init__(
        self,
        *,
        exclude: Iterable[Path] = (),
        ignored_names: Iterable[str] = (".DS_Store",),
    ) -> None:
        self.exclude = {Path(path).expanduser().resolve() for path in exclude}
        self.ignored_names = frozenset(ignored_names)

    def scan(self, root: Path) -> list[Entry]:
        """Return eligible entries under root, directories before files.

        Args:
            root: Staging directory to enumerate.

        Returns:
            list[Entry]: Directories first, then files, each in enumeration order.

        Raises:
            FileNotFoundError: If root does not exist.
            NotADirectoryError: If root is not a directory.
        """
        root = root.expanduser()
        if not root.exists():
            raise FileNotFoundError(f"Staging directory does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Staging path is not a directory: {root}")

        directories: list[Entry] = []
        files: list[Entry] = []
        for path, is_dir in self._iter_children(root):
            if path.name in self.ignored_names:
                continue
            if self._is_excluded(path):
                LOGGER.debug("Skipping %s; it is or holds a configured destination.", path)
                continue
            if is_dir:
                directories.append(Entry(path=path, kind=EntryKind.DIRECTORY))
            else:
                files.append(Entry(path=path, kind=EntryKind.FILE))

        return directories + files

    def _iter_children(self, root: Path) -> Iterator[tuple[Path, bool]]:
        with os.scandir(root) as iterator:
            for dir_entry in iterator:
                try:
                    is_dir = dir_entry.is_dir()
                except OSError:
                    is_dir = False
                yield Path(dir_entry.path), is_dir

    def _is_excluded(self, path: Path) -> bool:
        if not self.exclude:
            return False
        try:
            resolved = path.resolve()
        except OSError:
            return False
        # a destination itself, or an entry holding a destination somewhere below it
        return any(
            resolved == destination or destination.is_relative_to(resolved)
            for destination in self.exclude
        )
