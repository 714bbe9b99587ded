"""Core utilities and security modules."""

from app.core.exceptions import (
    AlreadyCancelled,
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingNotDeletable,
    BookingNotFound,
    CapacityExceeded,
    InvalidTransition,
    NotFoundError,
    ReferenceGenerationFailed,
    TripInactive,
    TripNotFound,
    ValidationError,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)

__all__ = [
    "AppException",
    "AlreadyCancelled",
    "AuthenticationError",
    "AuthorizationError",
    "BookingNotDeletable",
    "BookingNotFound",
    "CapacityExceeded",
    "InvalidTransition",
    "NotFoundError",
    "ReferenceGenerationFailed",
    "TripInactive",
    "TripNotFound",
    "ValidationError",
    "create_access_token",
    "create_refresh_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
