"""Service exceptions.

Every error carries the HTTP status it resolves to at the request boundary.
"""
from __future__ import annotations


class ServiceError(Exception):
    """Base error for the service layer."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(ServiceError):
    """Malformed or missing request input."""

    status_code = 400
    message = "Invalid request"


class PermissionDeniedError(ServiceError):
    """Owner token does not match the token that owns the stream."""

    status_code = 403
    message = "Stream is owned by a different token"


class StorageError(ServiceError):
    """Raised when reading from or writing to the store fails."""

    status_code = 500
    message = "Storage failure"


class RenderError(ServiceError):
    """Raised when the badge document cannot be parsed or rasterized."""

    status_code = 500
    message = "Badge rendering failed"
