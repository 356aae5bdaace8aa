"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.enums import BookingState


# ── Requests ──────────────────────────────────────────────────────────


class BookingCreateRequest(BaseModel):
    car_id: int = Field(..., gt=0)
    start_date: datetime
    end_date: datetime


class BookingUpdateRequest(BaseModel):
    state: Optional[BookingState] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    # renter and car are fixed once booked
    model_config = {"extra": "forbid"}


# ── Responses ─────────────────────────────────────────────────────────


class BookingResponse(BaseModel):
    id: int
    car_id: int
    renter_id: int
    state: BookingState
    start_date: datetime
    end_date: datetime

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
