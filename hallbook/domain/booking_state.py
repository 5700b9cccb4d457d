"""Booking state machine.

States: pending → approved | rejected | cancelled; approved → cancelled.
An edit that moves the hall, date or time sends pending/approved back to
pending. Rejected and cancelled are terminal.
"""

from hallbook.core.exceptions import InvalidTransition

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
CANCELLED = "cancelled"

BOOKING_STATUSES = (PENDING, APPROVED, REJECTED, CANCELLED)

# Statuses that hold a slot; terminal ones have vacated it
ACTIVE_STATUSES = frozenset({PENDING, APPROVED})

BOOKING_TRANSITIONS: dict[str, set[str]] = {
    PENDING: {PENDING, APPROVED, REJECTED, CANCELLED},
    APPROVED: {PENDING, CANCELLED},
    REJECTED: set(),
    CANCELLED: set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    """Validate booking state transition.

    Raises:
        InvalidTransition: If the transition is not allowed
    """
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransition(f"Invalid booking transition: {current} → {target}")


def can_approve(status: str) -> tuple[bool, str | None]:
    """Check if a booking can be approved."""
    if status == APPROVED:
        return False, "Booking is already approved"
    if status == CANCELLED:
        return False, "Cannot approve a cancelled booking"
    if status == REJECTED:
        return False, "Cannot approve a rejected booking"
    return True, None


def can_reject(status: str) -> tuple[bool, str | None]:
    """Check if a booking can be rejected."""
    if status == REJECTED:
        return False, "Booking is already rejected"
    if status == CANCELLED:
        return False, "Cannot reject a cancelled booking"
    if status == APPROVED:
        return False, "Cannot reject an approved booking; cancel it instead"
    return True, None


def can_cancel(status: str) -> tuple[bool, str | None]:
    """Check if a booking can be cancelled."""
    if status == CANCELLED:
        return False, "Booking is already cancelled"
    if status == REJECTED:
        return False, "Cannot cancel a rejected booking"
    return True, None


def can_edit(status: str) -> tuple[bool, str | None]:
    """Check if a booking's details can still be edited."""
    if status in (REJECTED, CANCELLED):
        return False, f"Cannot update a {status} booking"
    return True, None
