"""Errors raised while describing staging entries."""


class DescriptorError(Exception):
    """Base exception for descriptor generation failures."""


class MetadataUnavailable(DescriptorError):
    """Raised when size or timestamps of an entry cannot be read."""


class NameUnavailable(DescriptorError):
    """Raised when a path has no final component to report as its name."""
