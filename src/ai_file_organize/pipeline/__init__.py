"""Classification-and-relocation pipeline."""

from .context import RunContext
from .models import EntryOutcome, EntryState, RunReport
from .orchestrator import OutcomeCallback, PipelineOrchestrator

__all__ = [
    "EntryOutcome",
    "EntryState",
    "OutcomeCallback",
    "PipelineOrchestrator",
    "RunContext",
    "RunReport",
]
