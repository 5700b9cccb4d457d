"""Pydantic schemas for request/response validation."""

from hallbook.schemas.booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingListResponse,
    BookingRejectRequest,
    BookingResponse,
    BookingUpdate,
    SlotCheckRequest,
    SlotCheckResponse,
)
from hallbook.schemas.hall import (
    HallCreate,
    HallResponse,
    HallSummary,
    HallUpdate,
)
from hallbook.schemas.user import (
    PasswordChange,
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserSummary,
    UserUpdate,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "PasswordChange",
    "TokenResponse",
    "RefreshTokenRequest",
    # Hall
    "HallCreate",
    "HallUpdate",
    "HallResponse",
    "HallSummary",
    # Booking
    "BookingCreate",
    "BookingUpdate",
    "BookingRejectRequest",
    "BookingResponse",
    "BookingListResponse",
    "SlotCheckRequest",
    "SlotCheckResponse",
    "AvailabilityResponse",
]
