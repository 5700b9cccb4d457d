"""Custom application exceptions.

Every guard violation maps to one of these so callers can tell "try a
different time" (409) from "fix your input" (422) from "you may not do
this" (403).
"""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_failed"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class CapacityExceeded(ValidationError):
    """Expected attendees exceed the hall capacity."""

    code = "capacity_exceeded"

    def __init__(self, attendees: int, capacity: int) -> None:
        super().__init__(f"Expected attendees ({attendees}) exceeds hall capacity ({capacity})")


class HallNotAvailable(ValidationError):
    """Hall is switched off for booking (maintenance)."""

    code = "hall_not_available"

    def __init__(self, detail: str = "Hall is currently not available for booking") -> None:
        super().__init__(detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "unauthenticated"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "forbidden"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class SlotConflict(AppException):
    """Requested time slot overlaps another booking."""

    code = "conflict"

    def __init__(
        self,
        detail: str = "This time slot is already booked. Please choose a different time or hall.",
    ) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class HallInUse(AppException):
    """Hall still has active bookings and cannot be removed."""

    code = "hall_in_use"

    def __init__(self, active_bookings: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Hall has {active_bookings} pending or approved upcoming booking(s); "
                "cancel or reject them before deleting the hall"
            ),
        )


class InvalidTransition(AppException):
    """Invalid booking status for operation."""

    code = "invalid_transition"

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    code = "rate_limited"

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)


class ServiceUnavailable(AppException):
    """Backing service (database) unreachable."""

    code = "unavailable"

    def __init__(self, service: str = "database", detail: str | None = None) -> None:
        message = f"Service '{service}' is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)
