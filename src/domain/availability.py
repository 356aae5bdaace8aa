"""Car availability check shared by booking creation and rescheduling."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from .exceptions import CarNotAvailableError
from .repositories import BookingRepository, CarRepository

logger = logging.getLogger(__name__)


class AvailabilityChecker:
    def __init__(
        self, booking_repository: BookingRepository, car_repository: CarRepository
    ):
        self.booking_repository = booking_repository
        self.car_repository = car_repository

    async def ensure_available(
        self,
        tx: Any,
        car_id: int,
        start_date: datetime,
        end_date: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> None:
        """Raise unless *car_id* exists and is free on ``[start_date, end_date)``.

        ``exclude_booking_id`` lets a booking being rescheduled ignore its
        own current slot.
        """
        # raises CarNotFoundError before any overlap query
        await self.car_repository.get(tx, car_id)

        conflicts = await self.booking_repository.find_overlapping_bookings(
            tx, car_id, start_date, end_date, exclude_booking_id
        )
        if conflicts:
            logger.info(
                "Car %d unavailable: %d conflicting booking(s)",
                car_id,
                len(conflicts),
            )
            raise CarNotAvailableError(car_id, start_date, end_date)
