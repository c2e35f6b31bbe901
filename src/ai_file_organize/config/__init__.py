"""Configuration loading for ai-file-organize."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import AppConfig, Classification, ClassifierSettings
from .resolver import resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("config.json")
ENV_PREFIX = "AIFO__"


class ConfigManager:
    """Load the run configuration, applying environment and CLI precedence."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> AppConfig:
        """Load and validate the configuration file.

        Args:
            cli_overrides: Dotted-key overrides supplied on the command line.
            include_env: Whether ``AIFO__`` environment variables participate.

        Returns:
            AppConfig: Validated configuration for one run.

        Raises:
            ConfigError: If the file is missing, unparsable, or invalid.
        """
        file_data = self._read_file()
        env_data = self._extract_env(self._env) if include_env else None

        return resolve_with_precedence(
            defaults=AppConfig(),
            file_overrides=file_data,
            env_overrides=env_data or None,
            cli_overrides=cli_overrides,
        )

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.is_file():
            raise ConfigError(f"Configuration file not found: {self._config_path}")

        try:
            # JSON documents are valid YAML, so config.json and config.yaml share a parser
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read configuration file: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")

        return raw

    def _extract_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX):
                continue
            path = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
            if not path:
                continue
            parsed_value: Any = raw_value
            if path[-1] != "api_key":
                try:
                    parsed_value = yaml.safe_load(raw_value)
                except yaml.YAMLError:
                    parsed_value = raw_value

            node = overrides
            for segment in path[:-1]:
                existing = node.get(segment)
                if not isinstance(existing, dict):
                    existing = {}
                    node[segment] = existing
                node = existing
            node[path[-1]] = parsed_value

        return overrides


__all__ = [
    "AppConfig",
    "Classification",
    "ClassifierSettings",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "resolve_with_precedence",
]
