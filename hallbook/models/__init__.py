"""Database models."""

from hallbook.models.booking import Booking
from hallbook.models.hall import Hall
from hallbook.models.user import User

__all__ = [
    "User",
    "Hall",
    "Booking",
]
