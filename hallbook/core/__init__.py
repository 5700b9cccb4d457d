"""Core utilities and security modules."""

from hallbook.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    CapacityExceeded,
    HallInUse,
    HallNotAvailable,
    InvalidTransition,
    NotFoundError,
    ServiceUnavailable,
    SlotConflict,
    ValidationError,
)
from hallbook.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "CapacityExceeded",
    "HallInUse",
    "HallNotAvailable",
    "InvalidTransition",
    "NotFoundError",
    "ServiceUnavailable",
    "SlotConflict",
    "ValidationError",
    "create_access_token",
    "create_refresh_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
