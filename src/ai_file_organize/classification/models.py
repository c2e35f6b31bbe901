"""Request and response models for the chat-completions classifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_LABEL = "others"


class ChatMessage(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(extra="ignore")

    role: Optional[str] = None
    content: Optional[str] = None


class ChatRequest(BaseModel):
    """Body posted to the chat-completions endpoint."""

    model: str
    messages: List[ChatMessage]


class ChatChoice(BaseModel):
    """One completion choice in the response envelope."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[ChatMessage] = None


class ChatCompletionEnvelope(BaseModel):
    """Top-level response envelope; only ``choices`` is consulted."""

    model_config = ConfigDict(extra="ignore")

    choices: List[ChatChoice] = Field(default_factory=list)


class CategoryPayload(BaseModel):
    """Structured answer expected inside the assistant message content."""

    model_config = ConfigDict(extra="ignore")

    category: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Matched:
    """The response carried a category label."""

    label: str


@dataclass(frozen=True, slots=True)
class Unmatched:
    """The response carried no usable category.

    Attributes:
        reason: Short description of the structural mismatch.
    """

    reason: str

    @property
    def label(self) -> str:
        return FALLBACK_LABEL


ClassificationResult = Union[Matched, Unmatched]


__all__ = [
    "FALLBACK_LABEL",
    "CategoryPayload",
    "ChatChoice",
    "ChatCompletionEnvelope",
    "ChatMessage",
    "ChatRequest",
    "ClassificationResult",
    "Matched",
    "Unmatched",
]
