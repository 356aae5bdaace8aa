"""
Booking endpoints
=================

POST  /api/v1/bookings              -- reserve a car (always PENDING)
GET   /api/v1/bookings              -- list every booking
GET   /api/v1/bookings/{booking_id} -- fetch one booking (renter or owner)
PATCH /api/v1/bookings/{booking_id} -- change state and/or dates
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_booking_service, get_current_user_id
from src.api.middleware import limiter
from src.api.schemas import (
    BookingCreateRequest,
    BookingResponse,
    BookingUpdateRequest,
    ErrorResponse,
)
from src.config import settings
from src.domain.entities import BookingCreate, BookingUpdate
from src.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "",
    status_code=201,
    response_model=BookingResponse,
    summary="Create a booking",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid dates."},
        404: {"model": ErrorResponse, "description": "Car not found."},
        409: {"model": ErrorResponse, "description": "Car not available."},
    },
)
@limiter.limit(settings.rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    return await service.create(
        BookingCreate(
            car_id=body.car_id,
            renter_id=user_id,
            start_date=body.start_date,
            end_date=body.end_date,
        )
    )


@router.get(
    "",
    response_model=list[BookingResponse],
    summary="List all bookings",
)
@limiter.limit(settings.rate_limit)
async def list_bookings(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    return await service.get_all()


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking",
    responses={
        403: {"model": ErrorResponse, "description": "Not renter or owner."},
        404: {"model": ErrorResponse, "description": "Booking not found."},
    },
)
@limiter.limit(settings.rate_limit)
async def get_booking(
    request: Request,
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    return await service.get(booking_id, user_id)


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update booking state and/or dates",
    description=(
        "Owners confirm or cancel PENDING bookings; renters pick up "
        "CONFIRMED and return PICKED_UP ones.  Changing dates re-runs the "
        "availability check, ignoring the booking's own slot."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid dates."},
        403: {"model": ErrorResponse, "description": "Not renter or owner."},
        404: {"model": ErrorResponse, "description": "Booking not found."},
        409: {
            "model": ErrorResponse,
            "description": "Illegal transition or car not available.",
        },
    },
)
@limiter.limit(settings.rate_limit)
async def update_booking(
    request: Request,
    booking_id: int,
    body: BookingUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    return await service.update(
        booking_id,
        BookingUpdate(
            state=body.state,
            start_date=body.start_date,
            end_date=body.end_date,
        ),
        user_id,
    )
