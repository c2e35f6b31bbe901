"""Classifier client package."""

from .client import ClassifierClient, build_prompt, parse_label
from .errors import ClassificationError, MalformedResponse, TransportError
from .models import FALLBACK_LABEL, ClassificationResult, Matched, Unmatched

__all__ = [
    "FALLBACK_LABEL",
    "ClassificationError",
    "ClassificationResult",
    "ClassifierClient",
    "MalformedResponse",
    "Matched",
    "TransportError",
    "Unmatched",
    "build_prompt",
    "parse_label",
]
