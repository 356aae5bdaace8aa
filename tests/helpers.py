"""Seed identifiers and time helpers shared by the test modules."""

from datetime import datetime, timedelta, timezone

OWNER_ID = 1
RENTER_ID = 2
STRANGER_ID = 3
CAR_ID = 1
OTHER_CAR_ID = 2


def hours_from_now(hours: float) -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=hours)
