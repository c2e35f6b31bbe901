"""Run-scoped collaborators shared by pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import requests

from ai_file_organize.classification import ClassifierClient
from ai_file_organize.config.models import AppConfig
from ai_file_organize.organization import Relocator

from .models import EntryOutcome


@dataclass(slots=True)
class RunContext:
    """State owned by a single run.

    Attributes:
        config: Configuration loaded for the run.
        classifier: Client used to label descriptors.
        relocator: Mover applying the configured collision policy.
        failures: Entries that ended in the ``failed`` state.
    """

    config: AppConfig
    classifier: ClassifierClient
    relocator: Relocator
    failures: list[EntryOutcome] = field(default_factory=list)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> "RunContext":
        """Build a context with a fresh classifier client and relocator."""
        return cls(
            config=config,
            classifier=ClassifierClient(config.classifier, session=session),
            relocator=Relocator(config.organization.conflict_resolution),
        )

    def record_failure(self, outcome: EntryOutcome) -> None:
        self.failures.append(outcome)

    def close(self) -> None:
        self.classifier.close()


__all__ = ["RunContext"]
