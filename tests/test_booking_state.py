import pytest

from hallbook.core.exceptions import InvalidTransition
from hallbook.domain.booking_state import (
    APPROVED,
    BOOKING_STATUSES,
    CANCELLED,
    PENDING,
    REJECTED,
    assert_booking_transition,
    can_approve,
    can_cancel,
    can_edit,
    can_reject,
)


@pytest.mark.parametrize(
    "current, target",
    [
        (PENDING, APPROVED),
        (PENDING, REJECTED),
        (PENDING, CANCELLED),
        (PENDING, PENDING),
        (APPROVED, CANCELLED),
        (APPROVED, PENDING),
    ],
)
def test_allowed_transitions(current, target):
    assert_booking_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (APPROVED, REJECTED),
        (APPROVED, APPROVED),
        (REJECTED, APPROVED),
        (REJECTED, CANCELLED),
        (REJECTED, PENDING),
        (CANCELLED, APPROVED),
        (CANCELLED, PENDING),
    ],
)
def test_refused_transitions(current, target):
    with pytest.raises(InvalidTransition):
        assert_booking_transition(current, target)


@pytest.mark.parametrize("status", [REJECTED, CANCELLED])
def test_terminal_states_have_no_exit(status):
    for target in BOOKING_STATUSES:
        with pytest.raises(InvalidTransition):
            assert_booking_transition(status, target)


def test_can_approve():
    assert can_approve(PENDING) == (True, None)
    assert can_approve(APPROVED) == (False, "Booking is already approved")
    assert can_approve(CANCELLED)[0] is False
    assert can_approve(REJECTED)[0] is False


def test_can_reject():
    assert can_reject(PENDING) == (True, None)
    assert can_reject(REJECTED) == (False, "Booking is already rejected")
    assert can_reject(CANCELLED) == (False, "Cannot reject a cancelled booking")
    assert can_reject(APPROVED)[0] is False


def test_can_cancel():
    assert can_cancel(PENDING) == (True, None)
    assert can_cancel(APPROVED) == (True, None)
    assert can_cancel(CANCELLED) == (False, "Booking is already cancelled")
    assert can_cancel(REJECTED)[0] is False


def test_can_edit():
    assert can_edit(PENDING)[0] is True
    assert can_edit(APPROVED)[0] is True
    assert can_edit(REJECTED) == (False, "Cannot update a rejected booking")
    assert can_edit(CANCELLED)[0] is False
