"""
Repository Pattern -- SQLAlchemy implementations of the domain contracts.

Each method receives the ``AsyncSession`` of the current unit of work as
``tx`` and maps ORM rows to immutable domain entities, so no ORM object
ever leaves this module.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BOOKING_OVERLAP_CONSTRAINT, BookingModel, CarModel
from src.domain.dates import ensure_utc
from src.domain.entities import Booking, BookingCreate, Car
from src.domain.enums import BookingState
from src.domain.exceptions import (
    BookingNotFoundError,
    CarNotAvailableError,
    CarNotFoundError,
)
from src.domain.repositories import BookingRepository, CarRepository


def _booking_to_domain(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        car_id=row.car_id,
        renter_id=row.renter_id,
        state=row.state,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def _car_to_domain(row: CarModel) -> Car:
    return Car(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        state=row.state,
        license_plate=row.license_plate,
    )


def _is_overlap_violation(exc: IntegrityError) -> bool:
    """True if *exc* comes from the ``bookings_no_overlap`` exclusion constraint."""
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if getattr(candidate, "constraint_name", None) == BOOKING_OVERLAP_CONSTRAINT:
            return True
    return BOOKING_OVERLAP_CONSTRAINT in str(orig)


class SqlBookingRepository(BookingRepository):
    async def insert(self, tx: AsyncSession, data: BookingCreate) -> Booking:
        row = BookingModel(
            car_id=data.car_id,
            renter_id=data.renter_id,
            state=BookingState(data.state),
            start_date=ensure_utc(data.start_date),
            end_date=ensure_utc(data.end_date),
        )
        tx.add(row)
        await self._flush(tx, data.car_id, row.start_date, row.end_date)
        return _booking_to_domain(row)

    async def find(self, tx: AsyncSession, booking_id: int) -> Optional[Booking]:
        row = await tx.get(BookingModel, booking_id)
        return _booking_to_domain(row) if row else None

    async def get(self, tx: AsyncSession, booking_id: int) -> Booking:
        booking = await self.find(tx, booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    async def get_all(self, tx: AsyncSession) -> list[Booking]:
        result = await tx.execute(
            select(BookingModel).order_by(BookingModel.start_date.desc())
        )
        return [_booking_to_domain(row) for row in result.scalars().all()]

    async def find_overlapping_bookings(
        self,
        tx: AsyncSession,
        car_id: int,
        start_date: datetime,
        end_date: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Booking]:
        query = (
            select(BookingModel)
            .where(BookingModel.car_id == car_id)
            .where(BookingModel.state != BookingState.CANCELED)
            .where(BookingModel.start_date < ensure_utc(end_date))
            .where(BookingModel.end_date > ensure_utc(start_date))
            .order_by(BookingModel.start_date)
        )
        if exclude_booking_id is not None:
            query = query.where(BookingModel.id != exclude_booking_id)
        result = await tx.execute(query)
        return [_booking_to_domain(row) for row in result.scalars().all()]

    async def update(self, tx: AsyncSession, booking: Booking) -> Booking:
        row = await tx.get(BookingModel, booking.id)
        if row is None:
            raise BookingNotFoundError(booking.id)

        row.state = booking.state
        row.start_date = booking.start_date
        row.end_date = booking.end_date
        await self._flush(tx, booking.car_id, booking.start_date, booking.end_date)
        return _booking_to_domain(row)

    @staticmethod
    async def _flush(
        tx: AsyncSession, car_id: int, start_date: datetime, end_date: datetime
    ) -> None:
        try:
            await tx.flush()
        except IntegrityError as exc:
            if _is_overlap_violation(exc):
                raise CarNotAvailableError(car_id, start_date, end_date) from exc
            raise


class SqlCarRepository(CarRepository):
    async def get(self, tx: AsyncSession, car_id: int) -> Car:
        row = await tx.get(CarModel, car_id)
        if row is None:
            raise CarNotFoundError(car_id)
        return _car_to_domain(row)
