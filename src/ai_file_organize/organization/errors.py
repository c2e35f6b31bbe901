"""Errors raised while resolving destinations and moving entries."""

from __future__ import annotations

from pathlib import Path


class UnmatchedLabelError(Exception):
    """Raised when no classification rule matches a label; aborts the run."""

    def __init__(self, label: str) -> None:
        super().__init__(f"No classification rule configured for label {label!r}")
        self.label = label


class RelocationError(Exception):
    """Base exception for failures moving a single entry."""


class DestinationUnwritable(RelocationError):
    """Raised when the destination directory cannot be created."""


class NameCollision(RelocationError):
    """Raised when the destination already holds an entry with the same name."""

    def __init__(self, target: Path) -> None:
        super().__init__(f"Destination already exists: {target}")
        self.target = target


class MoveFailed(RelocationError):
    """Raised when neither rename nor copy-then-delete moved the entry."""
