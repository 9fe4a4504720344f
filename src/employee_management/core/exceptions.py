from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AccountTerminatedError(AuthenticationError):
    """Raised on login for an account scheduled for deletion."""

    def __init__(self, message: str, *, reason: Optional[str] = None, deletion_date: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.deletion_date = deletion_date


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConfigurationError(DomainError):
    """Raised when a feature is used before it has been configured (e.g. geofence)."""


class PermissionDeniedError(DomainError):
    """Raised when camera or location access is unavailable."""


class GeofenceViolationError(DomainError):
    """Raised when the device is outside the office geofence."""

    def __init__(self, message: str, *, distance_m: float, radius_m: float):
        super().__init__(message)
        self.distance_m = distance_m
        self.radius_m = radius_m


class VerificationFailedError(DomainError):
    """Raised when a portrait is rejected or a face does not match."""


class ConflictError(DomainError):
    """Raised on state or uniqueness conflicts (already clocked out, duplicate code)."""


class RemoteServiceError(DomainError):
    """Raised when a remote collaborator (store or AI model) fails."""


class VerificationUnavailableError(RemoteServiceError):
    """Raised when the verification service could not produce an answer."""

    def __init__(self, message: str = "Could not verify, please try again."):
        super().__init__(message)
