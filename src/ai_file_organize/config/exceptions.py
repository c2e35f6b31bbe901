"""Custom exceptions for configuration loading."""


class ConfigError(Exception):
    """Raised when the configuration file is missing, unreadable, or invalid."""
