"""Drive staging entries through describe, classify, resolve, and relocate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from ai_file_organize.classification import ClassificationError
from ai_file_organize.ingestion import DescriptorError, Entry, StagingScanner, describe
from ai_file_organize.organization import RelocationError, resolve_destination

from .context import RunContext
from .models import EntryOutcome, EntryState, RunReport

LOGGER = logging.getLogger(__name__)

OutcomeCallback = Callable[[EntryOutcome], None]


class PipelineOrchestrator:
    """Process the entries of a staging directory one at a time.

    Describe, classify, and relocate failures only fail the current entry,
    which stays where it is. A label with no matching classification rule
    raises ``UnmatchedLabelError`` and stops the run; entries relocated before
    that point stay relocated.
    """

    def __init__(self, context: RunContext, scanner: StagingScanner | None = None) -> None:
        self.context = context
        organization = context.config.organization
        self.scanner = scanner or StagingScanner(
            exclude=context.config.destination_dirs(),
            ignored_names=organization.ignored_names,
        )

    def run(self, staging_dir: Path, on_outcome: Optional[OutcomeCallback] = None) -> RunReport:
        """Process every eligible entry under staging_dir.

        Args:
            staging_dir: Directory whose immediate children are organized.
            on_outcome: Called with each entry's outcome as soon as it finishes.

        Returns:
            RunReport: Outcomes for every processed entry.

        Raises:
            UnmatchedLabelError: If a label matches no classification rule.
            FileNotFoundError: If staging_dir does not exist.
        """
        entries = self.scanner.scan(staging_dir)
        LOGGER.info("Found %d entries to organize in %s.", len(entries), staging_dir)

        report = RunReport(staging_dir=staging_dir)
        for entry in entries:
            outcome = self.process(entry)
            report.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return report

    def process(self, entry: Entry) -> EntryOutcome:
        """Run one entry through every stage and return its outcome."""
        outcome = EntryOutcome(entry=entry)
        config = self.context.config

        try:
            outcome.descriptor = describe(entry.path)
            outcome.state = EntryState.DESCRIBED
            LOGGER.debug("Descriptor for %s:\n%s", entry.path, outcome.descriptor)

            outcome.label = self.context.classifier.classify(
                outcome.descriptor, config.category_labels()
            )
            outcome.state = EntryState.CLASSIFIED
        except (DescriptorError, ClassificationError) as exc:
            return self._fail(outcome, exc)

        # UnmatchedLabelError propagates and ends the run
        outcome.destination = resolve_destination(outcome.label, config.classifications)
        outcome.state = EntryState.RESOLVED

        try:
            outcome.final_path = self.context.relocator.relocate(entry.path, outcome.destination)
        except RelocationError as exc:
            return self._fail(outcome, exc)

        outcome.state = EntryState.RELOCATED
        LOGGER.info("Moved %s to %s (%s).", entry.path, outcome.final_path, outcome.label)
        return outcome

    def _fail(self, outcome: EntryOutcome, exc: Exception) -> EntryOutcome:
        outcome.fail(exc)
        LOGGER.warning(
            "Skipping %s after %s stage: %s",
            outcome.entry.path,
            outcome.failed_at.value if outcome.failed_at else "unknown",
            exc,
        )
        self.context.record_failure(outcome)
        return outcome


__all__ = ["OutcomeCallback", "PipelineOrchestrator"]
