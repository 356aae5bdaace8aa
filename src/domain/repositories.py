"""
Persistence contracts the booking engine depends on.

Defined in the domain layer; concrete implementations live in
``src.infrastructure`` (SQLAlchemy-backed and in-memory).  Every method
takes the transaction handle ``tx`` handed out by ``Database.transactional``
so that all reads and writes of one engine call share a unit of work.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .entities import Booking, BookingCreate, Car

T = TypeVar("T")


class BookingRepository(ABC):
    @abstractmethod
    async def insert(self, tx: Any, data: BookingCreate) -> Booking: ...

    @abstractmethod
    async def get(self, tx: Any, booking_id: int) -> Booking:
        """Return the booking or raise ``BookingNotFoundError``."""

    @abstractmethod
    async def get_all(self, tx: Any) -> list[Booking]: ...

    @abstractmethod
    async def find_overlapping_bookings(
        self,
        tx: Any,
        car_id: int,
        start_date: datetime,
        end_date: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Booking]:
        """Non-canceled bookings of *car_id* overlapping ``[start, end)``."""

    @abstractmethod
    async def update(self, tx: Any, booking: Booking) -> Booking:
        """Persist *booking*; raise ``BookingNotFoundError`` if its row is gone."""


class CarRepository(ABC):
    @abstractmethod
    async def get(self, tx: Any, car_id: int) -> Car:
        """Return the car or raise ``CarNotFoundError``."""


class Database(ABC):
    """Transaction boundary."""

    @abstractmethod
    async def transactional(self, fn: Callable[[Any], Awaitable[T]]) -> T:
        """Run ``fn(tx)`` in one transaction; any exception rolls back and propagates."""
