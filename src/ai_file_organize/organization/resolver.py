"""Label to destination resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ai_file_organize.config.models import Classification

from .errors import UnmatchedLabelError


def resolve_destination(label: str, classifications: Sequence[Classification]) -> Path:
    """Return the directory of the first rule whose prompt equals label.

    Rules are scanned in configuration order so duplicate prompts resolve to
    the earliest entry.

    Raises:
        UnmatchedLabelError: If no rule carries the label.
    """
    for rule in classifications:
        if rule.prompt == label:
            return Path(rule.dir).expanduser()
    raise UnmatchedLabelError(label)


__all__ = ["resolve_destination"]
