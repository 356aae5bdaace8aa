"""
Booking lifecycle state machine.

    PENDING --owner--> CONFIRMED --renter--> PICKED_UP --renter--> RETURNED
       \\
        --owner--> CANCELED

RETURNED and CANCELED are terminal.  Re-submitting the current state is
always accepted without looking at the caller's role.
"""

from __future__ import annotations

from typing import Optional

from .enums import BOOKING_TRANSITIONS, TERMINAL_STATES, BookingState, UserBookingRole
from .exceptions import InvalidStateTransitionError


def can_transition(
    current: BookingState, new: BookingState, role: UserBookingRole
) -> bool:
    if current == new:
        return True
    return role in BOOKING_TRANSITIONS.get((current, new), frozenset())


def validate_transition(
    current: BookingState,
    new: BookingState,
    role: UserBookingRole,
    booking_id: Optional[int] = None,
) -> None:
    """Raise ``InvalidStateTransitionError`` if *role* may not move *current* -> *new*."""
    current, new = BookingState(current), BookingState(new)
    if not can_transition(current, new, role):
        raise InvalidStateTransitionError(booking_id, current, new)


def allowed_transitions(
    current: BookingState, role: UserBookingRole
) -> set[BookingState]:
    """States *role* can move a booking to from *current* (excluding itself)."""
    if current in TERMINAL_STATES:
        return set()
    return {
        to
        for (frm, to), roles in BOOKING_TRANSITIONS.items()
        if frm == current and role in roles
    }
