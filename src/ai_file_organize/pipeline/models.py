"""Per-entry state and run outcome models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ai_file_organize.ingestion.models import Entry


class EntryState(str, Enum):
    """Lifecycle of an entry through the pipeline."""

    DISCOVERED = "discovered"
    DESCRIBED = "described"
    CLASSIFIED = "classified"
    RESOLVED = "resolved"
    RELOCATED = "relocated"
    FAILED = "failed"


@dataclass(slots=True)
class EntryOutcome:
    """What happened to one entry.

    Attributes:
        entry: Entry as discovered in the staging directory.
        state: Last state reached; ``relocated`` or ``failed`` once finished.
        descriptor: Descriptor sent to the classifier, when generated.
        label: Label returned by the classifier, when classified.
        destination: Destination directory resolved for the label.
        final_path: Path of the entry after relocation.
        failed_at: State the entry was in when it failed.
        error: Error message for failed entries.
    """

    entry: Entry
    state: EntryState = EntryState.DISCOVERED
    descriptor: Optional[str] = None
    label: Optional[str] = None
    destination: Optional[Path] = None
    final_path: Optional[Path] = None
    failed_at: Optional[EntryState] = None
    error: Optional[str] = None

    def fail(self, exc: Exception) -> None:
        self.failed_at = self.state
        self.state = EntryState.FAILED
        self.error = f"{type(exc).__name__}: {exc}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.entry.path),
            "kind": self.entry.kind.value,
            "state": self.state.value,
            "label": self.label,
            "destination": str(self.destination) if self.destination else None,
            "final_path": str(self.final_path) if self.final_path else None,
            "failed_at": self.failed_at.value if self.failed_at else None,
            "error": self.error,
        }


@dataclass(slots=True)
class RunReport:
    """Outcomes of a completed run."""

    staging_dir: Path
    outcomes: list[EntryOutcome] = field(default_factory=list)

    @property
    def relocated(self) -> list[EntryOutcome]:
        return [outcome for outcome in self.outcomes if outcome.state is EntryState.RELOCATED]

    @property
    def failed(self) -> list[EntryOutcome]:
        return [outcome for outcome in self.outcomes if outcome.state is EntryState.FAILED]

    def counts(self) -> dict[str, int]:
        return {
            "entries": len(self.outcomes),
            "relocated": len(self.relocated),
            "failed": len(self.failed),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "staging_dir": str(self.staging_dir),
            "counts": self.counts(),
            "entries": [outcome.to_dict() for outcome in self.outcomes],
        }


__all__ = ["EntryOutcome", "EntryState", "RunReport"]
