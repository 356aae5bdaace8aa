"""FastAPI dependency injection helpers."""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from src.config import settings
from src.domain.repositories import Database
from src.infrastructure.database import SqlAlchemyDatabase
from src.infrastructure.repositories import SqlBookingRepository, SqlCarRepository
from src.services.booking_service import BookingService


def get_database() -> Database:
    """Transaction boundary over the shared async session factory."""
    return SqlAlchemyDatabase()


def get_booking_service(db: Database = Depends(get_database)) -> BookingService:
    return BookingService(SqlBookingRepository(), SqlCarRepository(), db)


def get_current_user_id(
    user_id: Optional[int] = Header(None, alias=settings.user_id_header),
) -> int:
    """Caller identity, injected by the authentication layer in front of us."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Missing user identity")
    if user_id <= 0:
        raise HTTPException(status_code=401, detail="Invalid user identity")
    return user_id
