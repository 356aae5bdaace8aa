"""
Date-range rules for bookings.

All intervals are half-open ``[start, end)``: a booking ending at 12:00
and another starting at 12:00 do not overlap.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .exceptions import InvalidDatesError

END_BEFORE_START = "End date must be after start date"
START_IN_PAST = "Start date must be in the future"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_dates(
    start: datetime, end: datetime, now: Optional[datetime] = None
) -> None:
    """Raise ``InvalidDatesError`` unless ``now < start < end``."""
    start, end = ensure_utc(start), ensure_utc(end)
    now = ensure_utc(now) if now is not None else utcnow()

    if start >= end:
        raise InvalidDatesError(start, end, END_BEFORE_START)
    if start <= now:
        raise InvalidDatesError(start, end, START_IN_PAST)


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    return ensure_utc(a_start) < ensure_utc(b_end) and ensure_utc(
        b_start
    ) < ensure_utc(a_end)
