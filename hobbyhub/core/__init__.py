"""
Core infrastructure for the HobbyHub backend: database, auth tokens,
password hashing, exceptions, error handlers and logging.
"""

from .exceptions import (
    HobbyHubException,
    ErrorCode,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    ConflictError,
    ProviderError,
    PermissionDenied,
    PositionUnavailable,
    InvalidStateTransition,
    ApiError,
)

__all__ = [
    "HobbyHubException",
    "ErrorCode",
    "ValidationError",
    "NotFoundError",
    "AuthenticationError",
    "ConflictError",
    "ProviderError",
    "PermissionDenied",
    "PositionUnavailable",
    "InvalidStateTransition",
    "ApiError",
]
