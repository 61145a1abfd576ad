"""
Custom exceptions for the HobbyHub backend and device-side services.

Server-side errors carry an HTTP status and are rendered by the error handlers
as ``{"success": false, "error": ...}``. Device-side errors (permission,
position, provider) are caught at the service boundary and turned into empty
results, so they rarely reach callers.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    CONFLICT = "CONFLICT"

    PROVIDER_ERROR = "PROVIDER_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    API_ERROR = "API_ERROR"

    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class HobbyHubException(Exception):
    """Base exception for HobbyHub."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class ValidationError(HobbyHubException):
    """Raised when required input is missing or out of range."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details=details,
            status_code=400
        )


class NotFoundError(HobbyHubException):
    """Raised when a resource, or a geocode match, does not exist."""

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.NOT_FOUND,
            details=details,
            status_code=404
        )


class AuthenticationError(HobbyHubException):
    """Raised for missing, malformed, expired or unknown credentials."""

    def __init__(self, message: str = "Not authorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.AUTHENTICATION_FAILED,
            details=details,
            status_code=401
        )


class ConflictError(HobbyHubException):
    """Raised when a unique resource already exists."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONFLICT,
            details=details,
            status_code=400
        )


class ProviderError(HobbyHubException):
    """Raised when the geocoding provider times out, is unreachable or answers non-2xx."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.PROVIDER_ERROR,
            details=details,
            status_code=502
        )


class PermissionDenied(HobbyHubException):
    """Raised when a position is requested without a granted location permission."""

    def __init__(self, message: str = "Location permission not granted"):
        super().__init__(
            message=message,
            error_code=ErrorCode.PERMISSION_DENIED,
            status_code=403
        )


class PositionUnavailable(HobbyHubException):
    """Raised when the platform location provider fails or times out."""

    def __init__(self, message: str = "Current position is unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.POSITION_UNAVAILABLE,
            details=details,
            status_code=503
        )


class InvalidStateTransition(HobbyHubException):
    """Raised when the permission state machine is driven out of order."""

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot move permission status from '{current}' to '{target}'",
            error_code=ErrorCode.INVALID_STATE_TRANSITION,
            details={"current": current, "target": target},
            status_code=409
        )


class ApiError(HobbyHubException):
    """Raised by the backend API client for non-2xx responses."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.API_ERROR,
            details=details,
            status_code=status_code
        )
