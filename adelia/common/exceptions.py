"""
Custom exceptions for Adelia.
"""

from typing import Any


class AdeliaError(Exception):
    """Base exception for Adelia."""

    # HTTP status used by the API exception handler
    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(AdeliaError):
    """Configuration related errors."""

    pass


class CreativeValidationError(AdeliaError):
    """Settings or assets rejected before any rendering happens."""

    status_code = 422

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = dict(details or {})
        if field is not None:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class UnknownCreativeKindError(AdeliaError):
    """No renderer registered for the requested kind."""

    status_code = 404


class ManifestError(AdeliaError):
    """Manifest could not be parsed or is inconsistent."""

    pass


class UploadError(AdeliaError):
    """Upload collaborator failed to store an artifact."""

    status_code = 502


class StorageError(AdeliaError):
    """Local storage failure."""

    status_code = 500


class RecordNotFoundError(AdeliaError):
    """No creative record stored under the given id."""

    status_code = 404
