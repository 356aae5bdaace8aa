"""
In-memory implementations of the persistence contracts.

Used by unit tests and local experiments.  The transaction handle is the
``InMemoryStore`` itself; ``InMemoryDatabase`` serialises transactions with
an ``asyncio.Lock`` and restores a snapshot when ``fn`` raises, which gives
the same all-or-nothing, serializable behaviour the engine expects from
PostgreSQL.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar

from src.domain.dates import overlaps
from src.domain.entities import Booking, BookingCreate, Car
from src.domain.enums import BookingState
from src.domain.exceptions import BookingNotFoundError, CarNotFoundError
from src.domain.repositories import BookingRepository, CarRepository, Database

T = TypeVar("T")


@dataclass
class InMemoryStore:
    bookings: dict[int, Booking] = field(default_factory=dict)
    cars: dict[int, Car] = field(default_factory=dict)
    next_booking_id: int = 1

    def add_car(self, car: Car) -> Car:
        self.cars[car.id] = car
        return car

    def add_booking(self, booking: Booking) -> Booking:
        """Seed a booking directly, bypassing engine validation."""
        if booking.id is None:
            booking = booking.evolve(id=self.next_booking_id)
        self.bookings[booking.id] = booking
        self.next_booking_id = max(self.next_booking_id, booking.id + 1)
        return booking

    def snapshot(self) -> tuple[dict[int, Booking], dict[int, Car], int]:
        # entities are frozen, shallow copies are enough
        return dict(self.bookings), dict(self.cars), self.next_booking_id

    def restore(self, snapshot: tuple[dict[int, Booking], dict[int, Car], int]) -> None:
        self.bookings, self.cars, self.next_booking_id = snapshot


class InMemoryDatabase(Database):
    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()
        self._lock = asyncio.Lock()

    async def transactional(self, fn: Callable[[InMemoryStore], Awaitable[T]]) -> T:
        async with self._lock:
            snapshot = self.store.snapshot()
            try:
                return await fn(self.store)
            except BaseException:
                self.store.restore(snapshot)
                raise


class InMemoryBookingRepository(BookingRepository):
    async def insert(self, tx: InMemoryStore, data: BookingCreate) -> Booking:
        booking = Booking(
            id=tx.next_booking_id,
            car_id=data.car_id,
            renter_id=data.renter_id,
            state=data.state,
            start_date=data.start_date,
            end_date=data.end_date,
        )
        tx.bookings[booking.id] = booking
        tx.next_booking_id += 1
        return booking

    async def get(self, tx: InMemoryStore, booking_id: int) -> Booking:
        try:
            return tx.bookings[booking_id]
        except KeyError:
            raise BookingNotFoundError(booking_id) from None

    async def get_all(self, tx: InMemoryStore) -> list[Booking]:
        return sorted(tx.bookings.values(), key=lambda b: b.start_date, reverse=True)

    async def find_overlapping_bookings(
        self,
        tx: InMemoryStore,
        car_id: int,
        start_date: datetime,
        end_date: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Booking]:
        return sorted(
            (
                b
                for b in tx.bookings.values()
                if b.id != exclude_booking_id
                and b.car_id == car_id
                and b.state != BookingState.CANCELED
                and overlaps(b.start_date, b.end_date, start_date, end_date)
            ),
            key=lambda b: b.start_date,
        )

    async def update(self, tx: InMemoryStore, booking: Booking) -> Booking:
        if booking.id not in tx.bookings:
            raise BookingNotFoundError(booking.id)
        tx.bookings[booking.id] = booking
        return booking


class InMemoryCarRepository(CarRepository):
    async def get(self, tx: InMemoryStore, car_id: int) -> Car:
        try:
            return tx.cars[car_id]
        except KeyError:
            raise CarNotFoundError(car_id) from None
