"""Errors raised by the classifier client."""


class ClassificationError(Exception):
    """Base exception for classification failures."""


class TransportError(ClassificationError):
    """Raised on network failure or a non-success HTTP status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(ClassificationError):
    """Raised when the response body is not a JSON object at all."""
