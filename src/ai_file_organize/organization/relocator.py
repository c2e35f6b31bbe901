"""Move staging entries into their destination directories."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Literal

from .errors import DestinationUnwritable, MoveFailed, NameCollision

LOGGER = logging.getLogger(__name__)

ConflictStrategy = Literal["append_number", "fail"]


class Relocator:
    """Move a file or directory subtree into a destination directory.

    A plain rename is attempted first. When source and destination live on
    different volumes the entry is copied into a hidden staging path next to
    the target, verified, promoted to the target name, and only then removed
    from the source.
    """

    def __init__(self, conflict_resolution: ConflictStrategy = "append_number") -> None:
        self.conflict_resolution = conflict_resolution

    def relocate(self, source: Path, destination_dir: Path) -> Path:
        """Move source into destination_dir and return its new path.

        An entry that already lives directly in destination_dir is left alone
        and its current path is returned.

        Args:
            source: Entry to move.
            destination_dir: Directory receiving the entry; created if absent.

        Returns:
            Path: Final location of the entry.

        Raises:
            DestinationUnwritable: If destination_dir cannot be created.
            NameCollision: If the name is taken and the policy is ``fail``.
            MoveFailed: If the entry could not be moved.
        """
        if not source.name:
            raise MoveFailed(f"Cannot move a path without a name: {source}")
        if not _lexists(source):
            raise MoveFailed(f"Source path is missing: {source}")
        if _same_directory(source.parent, destination_dir):
            LOGGER.debug("%s already sits in %s; leaving it in place.", source, destination_dir)
            return source

        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DestinationUnwritable(f"Cannot create {destination_dir}: {exc}") from exc
        if not destination_dir.is_dir():
            raise DestinationUnwritable(f"Destination is not a directory: {destination_dir}")

        target = self._resolve_target(source, destination_dir / source.name)

        try:
            os.rename(source, target)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise MoveFailed(f"Cannot move {source} to {target}: {exc}") from exc
            LOGGER.info("%s is on another volume; copying before removing the source.", source)
            self._copy_then_delete(source, target)

        return target

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _resolve_target(self, source: Path, candidate: Path) -> Path:
        if not _lexists(candidate):
            return candidate
        if self.conflict_resolution == "fail":
            raise NameCollision(candidate)

        if source.is_dir():
            stem, suffix = candidate.name, ""
        else:
            stem, suffix = candidate.stem, candidate.suffix

        counter = 1
        final_candidate = candidate.with_name(f"{stem}-{counter}{suffix}")
        while _lexists(final_candidate):
            counter += 1
            final_candidate = candidate.with_name(f"{stem}-{counter}{suffix}")
        LOGGER.info("%s exists; using %s instead.", candidate, final_candidate.name)
        return final_candidate

    def _copy_then_delete(self, source: Path, target: Path) -> None:
        staging = target.with_name(f".{target.name}.partial-{uuid.uuid4().hex[:8]}")

        try:
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, staging, symlinks=True)
            else:
                shutil.copy2(source, staging, follow_symlinks=False)
            mismatch = _compare_trees(source, staging)
            if mismatch:
                raise MoveFailed(f"Copy of {source} is incomplete: {mismatch}")
            os.replace(staging, target)
        except (OSError, MoveFailed) as exc:
            _discard(staging)
            if isinstance(exc, MoveFailed):
                raise
            raise MoveFailed(f"Cannot copy {source} to {target}: {exc}") from exc

        try:
            _discard(source, strict=True)
        except OSError as exc:
            raise MoveFailed(
                f"Copied {source} to {target} but could not remove the source: {exc}"
            ) from exc


def _lexists(path: Path) -> bool:
    return os.path.lexists(path)


def _same_directory(first: Path, second: Path) -> bool:
    try:
        return first.resolve() == second.resolve()
    except OSError:
        return False


def _snapshot(root: Path) -> dict[str, object]:
    """Map each relative path under root to its size, link target, or ``"dir"``."""
    if root.is_symlink():
        return {".": f"link:{os.readlink(root)}"}
    if not root.is_dir():
        return {".": root.stat().st_size}

    entries: dict[str, object] = {".": "dir"}
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames + filenames:
            path = base / name
            relative = str(path.relative_to(root))
            if path.is_symlink():
                entries[relative] = f"link:{os.readlink(path)}"
            elif path.is_dir():
                entries[relative] = "dir"
            else:
                entries[relative] = path.stat().st_size
    return entries


def _compare_trees(source: Path, copy: Path) -> str | None:
    expected = _snapshot(source)
    actual = _snapshot(copy)
    if expected == actual:
        return None
    missing = sorted(set(expected) - set(actual))
    if missing:
        return f"missing {missing[0]}"
    differing = sorted(key for key in expected if expected[key] != actual.get(key))
    if differing:
        return f"{differing[0]} differs"
    return "unexpected extra entries"


def _discard(path: Path, *, strict: bool = False) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif _lexists(path):
            path.unlink()
    except OSError:
        if strict:
            raise
        LOGGER.warning("Could not remove %s.", path)


__all__ = ["ConflictStrategy", "Relocator"]
