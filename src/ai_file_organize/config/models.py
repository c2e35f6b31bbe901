"""Configuration models describing classification rules and transport settings."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrganizeBaseModel(BaseModel):
    """Shared configuration for configuration models."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class Classification(OrganizeBaseModel):
    """A rule pairing an expected classifier label with a destination.

    Attributes:
        prompt: Label the classifier is expected to return.
        dir: Destination directory for entries carrying the label.
    """

    prompt: str
    dir: str


class ClassifierSettings(OrganizeBaseModel):
    """Chat-completions endpoint settings.

    Attributes:
        endpoint: URL receiving the chat-completions request.
        api_key: Bearer credential sent with each request.
        model: Model identifier placed in the request body.
        timeout_seconds: Request timeout; ``None`` leaves the transport default.
        system_prompt: System message sent ahead of the classification prompt.
    """

    endpoint: str = "https://api.openai.com/v1/chat/completions"
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    timeout_seconds: Optional[float] = None
    system_prompt: str = "You are a file classification assistant."


class OrganizationOptions(OrganizeBaseModel):
    """Settings that govern enumeration and relocation.

    Attributes:
        conflict_resolution: Policy applied when the destination name is taken.
        ignored_names: Entry names never picked up from the staging directory.
    """

    conflict_resolution: Literal["append_number", "fail"] = "append_number"
    ignored_names: List[str] = Field(default_factory=lambda: [".DS_Store"])


class LoggingSettings(OrganizeBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class AppConfig(OrganizeBaseModel):
    """Top-level configuration for a run.

    Attributes:
        classifications: Ordered classification rules; the first matching prompt wins.
        classifier: Classifier transport settings.
        organization: Enumeration and relocation settings.
        logging: Logging configuration.
    """

    classifications: List[Classification] = Field(default_factory=list)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    organization: OrganizationOptions = Field(default_factory=OrganizationOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def category_labels(self) -> list[str]:
        """Return the distinct configured prompts in configuration order."""
        return list(dict.fromkeys(rule.prompt for rule in self.classifications))

    def destination_dirs(self) -> list[Path]:
        """Return every configured destination as an absolute path."""
        return [Path(rule.dir).expanduser().resolve() for rule in self.classifications]


__all__ = [
    "OrganizeBaseModel",
    "Classification",
    "ClassifierSettings",
    "OrganizationOptions",
    "LoggingSettings",
    "AppConfig",
]
