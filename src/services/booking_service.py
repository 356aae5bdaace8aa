"""
Booking Engine
==============

Orchestrates the booking lifecycle on top of the repository contracts.

Concurrency safety
------------------
The service keeps no shared mutable state.  Every operation runs its
read -> validate -> write sequence inside a single
``Database.transactional`` call, so the overlap check and the following
insert/update are atomic with respect to other transactions touching the
same car.  Isolation is the store's job (SERIALIZABLE plus an exclusion
constraint in PostgreSQL); the engine takes no locks and never retries.

Flow per call
-------------
* ``create``  -- validate dates -> car exists -> availability -> insert PENDING
* ``get``     -- booking -> car -> renter-or-owner check
* ``get_all`` -- every booking, unfiltered
* ``update``  -- booking -> car -> access -> transition -> dates/availability
  -> persist merged snapshot
"""

from __future__ import annotations

import logging
from typing import Any

from src.domain.availability import AvailabilityChecker
from src.domain.dates import validate_dates
from src.domain.entities import (
    Booking,
    BookingCreate,
    BookingUpdate,
    Car,
    role_of,
)
from src.domain.enums import BookingState, UserBookingRole
from src.domain.exceptions import (
    BookingAccessDeniedError,
    InvalidStateTransitionError,
)
from src.domain.repositories import BookingRepository, CarRepository, Database
from src.domain.transitions import allowed_transitions, validate_transition

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        booking_repository: BookingRepository,
        car_repository: CarRepository,
        database: Database,
    ):
        self.booking_repository = booking_repository
        self.car_repository = car_repository
        self.database = database
        self.availability = AvailabilityChecker(booking_repository, car_repository)

    # ── Public API ────────────────────────────────────────────────────

    async def create(self, data: BookingCreate) -> Booking:
        logger.info(
            "Creating booking for car %d from %s to %s",
            data.car_id,
            data.start_date.isoformat(),
            data.end_date.isoformat(),
        )
        # Fails before any car lookup or transaction
        validate_dates(data.start_date, data.end_date)

        async def _create(tx: Any) -> Booking:
            await self.availability.ensure_available(
                tx, data.car_id, data.start_date, data.end_date
            )
            pending = BookingCreate(
                car_id=data.car_id,
                renter_id=data.renter_id,
                start_date=data.start_date,
                end_date=data.end_date,
                state=BookingState.PENDING,
            )
            return await self.booking_repository.insert(tx, pending)

        booking = await self.database.transactional(_create)
        logger.info(
            "Successfully created booking %d for car %d", booking.id, booking.car_id
        )
        return booking

    async def get(self, booking_id: int, user_id: int) -> Booking:
        async def _get(tx: Any) -> Booking:
            booking, car = await self._load(tx, booking_id)
            self._assert_access(booking, car, user_id)
            return booking

        return await self.database.transactional(_get)

    async def get_all(self) -> list[Booking]:
        return await self.database.transactional(self.booking_repository.get_all)

    async def update(
        self, booking_id: int, updates: BookingUpdate, user_id: int
    ) -> Booking:
        async def _update(tx: Any) -> Booking:
            booking, car = await self._load(tx, booking_id)
            role = self._assert_access(booking, car, user_id)

            if updates.state is not None:
                try:
                    validate_transition(booking.state, updates.state, role, booking_id)
                except InvalidStateTransitionError:
                    logger.warning(
                        "User %d (%s) may not move booking %d from %s to %s; allowed: %s",
                        user_id,
                        role.value,
                        booking_id,
                        booking.state.value,
                        BookingState(updates.state).value,
                        sorted(s.value for s in allowed_transitions(booking.state, role))
                        or "none",
                    )
                    raise

            # State-only updates skip date validation and availability
            if updates.changes_dates:
                start = updates.start_date or booking.start_date
                end = updates.end_date or booking.end_date
                validate_dates(start, end)
                await self.availability.ensure_available(
                    tx, booking.car_id, start, end, exclude_booking_id=booking_id
                )

            updated = booking.evolve(
                state=updates.state,
                start_date=updates.start_date,
                end_date=updates.end_date,
            )
            return await self.booking_repository.update(tx, updated)

        booking = await self.database.transactional(_update)
        logger.info(
            "Booking %d updated by user %d (state=%s)",
            booking.id,
            user_id,
            booking.state.value,
        )
        return booking

    # ── Internals ─────────────────────────────────────────────────────

    async def _load(self, tx: Any, booking_id: int) -> tuple[Booking, Car]:
        booking = await self.booking_repository.get(tx, booking_id)
        car = await self.car_repository.get(tx, booking.car_id)
        return booking, car

    @staticmethod
    def _assert_access(booking: Booking, car: Car, user_id: int) -> UserBookingRole:
        """Return the caller's role; raise if they are neither renter nor owner."""
        role = role_of(car, booking, user_id)
        if role is UserBookingRole.NONE:
            logger.warning(
                "User %d denied access to booking %d", user_id, booking.id
            )
            raise BookingAccessDeniedError(booking.id)
        return role
