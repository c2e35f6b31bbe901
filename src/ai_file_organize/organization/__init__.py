"""Destination resolution and relocation."""

from .errors import (
    DestinationUnwritable,
    MoveFailed,
    NameCollision,
    RelocationError,
    UnmatchedLabelError,
)
from .relocator import Relocator
from .resolver import resolve_destination

__all__ = [
    "DestinationUnwritable",
    "MoveFailed",
    "NameCollision",
    "RelocationError",
    "Relocator",
    "UnmatchedLabelError",
    "resolve_destination",
]
