"""
Error taxonomy shared by the route layer and the client hooks.
Callers branch on the exception class instead of probing for a message field.
"""

from typing import Optional


class CineSyncError(Exception):
    """Base exception for all application errors."""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        # None when the source gave no message; str(error) falls back to the default
        self.message = message
        super().__init__(message or self.default_message)


class ConfigurationError(CineSyncError):
    """Missing or invalid process configuration."""

    default_message = "Invalid configuration"


class ValidationError(CineSyncError):
    """Client input is missing or malformed (4xx)."""

    default_message = "Invalid request"


class AuthenticationError(CineSyncError):
    """Credentials were rejected (401)."""

    default_message = "Invalid credentials"


class UpstreamError(CineSyncError):
    """The TMDB catalog call failed."""

    default_message = "Upstream request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InternalError(CineSyncError):
    """Unexpected failure inside the application (500)."""

    default_message = "Internal server error"


class ApiError(CineSyncError):
    """
    Error rendered at the HTTP boundary.
    `key` is the body field carrying the message: movie routes answer with
    {"error": ...}, auth routes with {"message": ...}.
    """

    def __init__(self, status_code: int, message: str, key: str = "error"):
        super().__init__(message)
        self.status_code = status_code
        self.key = key

    def to_body(self) -> dict:
        return {self.key: self.message}
