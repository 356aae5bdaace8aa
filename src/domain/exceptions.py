"""
Domain error taxonomy.

Every error raised by the booking engine derives from
``BookingDomainError``; anything else (driver / connectivity failures)
is infrastructure and propagates untouched.
"""

from __future__ import annotations

from datetime import datetime


class BookingDomainError(Exception):
    """Base class for all booking-engine errors."""


# ── Missing resources ─────────────────────────────────────────────────


class NotFoundError(BookingDomainError):
    def __init__(self, resource: str, resource_id: int):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} with id {resource_id} not found")


class CarNotFoundError(NotFoundError):
    def __init__(self, car_id: int):
        self.car_id = car_id
        super().__init__("Car", car_id)


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: int):
        self.booking_id = booking_id
        super().__init__("Booking", booking_id)


# ── Authorization ─────────────────────────────────────────────────────


class AccessDeniedError(BookingDomainError):
    def __init__(self, resource: str, resource_id: int):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"Access to {resource} {resource_id} denied")


class BookingAccessDeniedError(AccessDeniedError):
    """Caller is neither the renter nor the owner of the booked car."""

    def __init__(self, booking_id: int):
        self.booking_id = booking_id
        super().__init__("Booking", booking_id)


# ── Validation / conflicts ────────────────────────────────────────────


class InvalidDatesError(BookingDomainError):
    def __init__(self, start_date: datetime, end_date: datetime, reason: str):
        self.start_date = start_date
        self.end_date = end_date
        self.reason = reason
        super().__init__(f"Invalid booking dates: {reason}")


class CarNotAvailableError(BookingDomainError):
    def __init__(self, car_id: int, start_date: datetime, end_date: datetime):
        self.car_id = car_id
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Car {car_id} is not available from "
            f"{start_date.isoformat()} to {end_date.isoformat()}"
        )


class InvalidStateTransitionError(BookingDomainError):
    def __init__(self, booking_id: int | None, from_state, to_state):
        self.booking_id = booking_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid booking state transition from {_value(from_state)} "
            f"to {_value(to_state)} for booking {booking_id}"
        )


def _value(state) -> str:
    return getattr(state, "value", state)
