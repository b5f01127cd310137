"""Error types for the content-to-podcast pipeline."""

from typing import Any, Optional


class ReadItOutError(Exception):
    """Base exception for ReadItOut errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(ReadItOutError):
    """Raised when request fields are missing or malformed."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)


class NotFoundError(ReadItOutError):
    """Raised when a podcast does not exist (or is not public)."""

    status_code = 404


class TranscriptNotReadyError(ReadItOutError):
    """Raised when a transcript is requested before the podcast completed."""

    status_code = 400


class FetchError(ReadItOutError):
    """Raised when an upstream HTTP fetch fails during extraction."""

    status_code = 502


class ConfigurationError(ReadItOutError):
    """Raised when a required credential or key is absent."""


class SynthesisError(ReadItOutError):
    """Raised when a text-to-speech provider fails."""

    status_code = 502
