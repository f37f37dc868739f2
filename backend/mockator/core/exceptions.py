"""Custom exceptions for the application.

Every exception carries the HTTP status the generation endpoint answers with,
so the endpoint can convert any of them into the ``{"error": ...}`` envelope.
"""

from __future__ import annotations

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class MockatorError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or UNKNOWN_ERROR_MESSAGE)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(MockatorError):
    """Raised when no provider (or an unsupported one) is selected."""

    status_code = 400


class AuthError(MockatorError):
    """Raised when the credential for the selected provider is missing."""

    status_code = 401


class ValidationError(MockatorError):
    """Raised when input validation fails."""

    status_code = 400


class UpstreamError(MockatorError):
    """Raised when the LLM provider fails or the stream breaks."""

    status_code = 500


class UnknownError(MockatorError):
    """Raised for failures that carry no recognizable message."""

    pass


def error_message(exc: BaseException) -> str:
    """Return the user-facing message for an exception."""
    text = str(exc).strip()
    return text or UNKNOWN_ERROR_MESSAGE
