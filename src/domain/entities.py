"""
Domain entities.

Patterns used
-------------
- **Immutable snapshots**: ``Booking`` and ``Car`` are frozen dataclasses;
  an update produces a new ``Booking`` via ``Booking.evolve``.
- Structural invariants (positive ids, known state) are checked on
  construction so malformed rows fail fast.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .dates import ensure_utc
from .enums import BookingState, CarState, UserBookingRole


def _check_positive(name: str, value: Optional[int], *, optional=False) -> None:
    if value is None and optional:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Booking:
    car_id: int
    renter_id: int
    start_date: datetime
    end_date: datetime
    state: BookingState = BookingState.PENDING
    id: Optional[int] = None

    def __post_init__(self) -> None:
        _check_positive("id", self.id, optional=True)
        _check_positive("car_id", self.car_id)
        _check_positive("renter_id", self.renter_id)
        try:
            state = BookingState(self.state)
        except ValueError:
            raise ValueError(f"Unknown booking state: {self.state!r}") from None
        object.__setattr__(self, "state", state)
        object.__setattr__(self, "start_date", ensure_utc(self.start_date))
        object.__setattr__(self, "end_date", ensure_utc(self.end_date))

    def evolve(self, **changes) -> "Booking":
        """Return a copy with *changes* applied; ``None`` values are ignored."""
        return dataclasses.replace(
            self, **{k: v for k, v in changes.items() if v is not None}
        )


@dataclass(frozen=True)
class Car:
    id: int
    owner_id: int
    name: str = ""
    state: CarState = CarState.LOCKED
    license_plate: Optional[str] = None

    def __post_init__(self) -> None:
        _check_positive("id", self.id)
        _check_positive("owner_id", self.owner_id)
        object.__setattr__(self, "state", CarState(self.state))


# ── Commands ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BookingCreate:
    """Data needed to create a booking.

    ``state`` is accepted for symmetry with ``Booking`` but every new
    booking is stored as PENDING regardless of what is passed here.
    """

    car_id: int
    renter_id: int
    start_date: datetime
    end_date: datetime
    state: BookingState = BookingState.PENDING


@dataclass(frozen=True)
class BookingUpdate:
    state: Optional[BookingState] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @property
    def changes_dates(self) -> bool:
        return self.start_date is not None or self.end_date is not None


# ── Roles ─────────────────────────────────────────────────────────────


def role_of(car: Car, booking: Booking, user_id: int) -> UserBookingRole:
    """Classify *user_id* relative to a booking; the owner role wins."""
    if car.owner_id == user_id:
        return UserBookingRole.OWNER
    if booking.renter_id == user_id:
        return UserBookingRole.RENTER
    return UserBookingRole.NONE
