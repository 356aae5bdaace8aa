"""Domain enumerations and state-transition rules."""

import enum


class BookingState(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PICKED_UP = "PICKED_UP"
    RETURNED = "RETURNED"
    CANCELED = "CANCELED"


class UserBookingRole(str, enum.Enum):
    OWNER = "OWNER"
    RENTER = "RENTER"
    NONE = "NONE"


class CarState(str, enum.Enum):
    LOCKED = "LOCKED"
    UNLOCKED = "UNLOCKED"
    DECOMMISSIONED = "DECOMMISSIONED"


# State machine: maps (current, next) -> roles allowed to make that move
BOOKING_TRANSITIONS: dict[
    tuple[BookingState, BookingState], frozenset[UserBookingRole]
] = {
    (BookingState.PENDING, BookingState.CONFIRMED): frozenset(
        {UserBookingRole.OWNER}
    ),
    (BookingState.PENDING, BookingState.CANCELED): frozenset(
        {UserBookingRole.OWNER}
    ),
    (BookingState.CONFIRMED, BookingState.PICKED_UP): frozenset(
        {UserBookingRole.RENTER}
    ),
    (BookingState.PICKED_UP, BookingState.RETURNED): frozenset(
        {UserBookingRole.RENTER}
    ),
}

TERMINAL_STATES = frozenset({BookingState.RETURNED, BookingState.CANCELED})
