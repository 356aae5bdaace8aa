"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``users``     -- registered people; both owners and renters
* ``cars``      -- vehicles, each with exactly one owner
* ``bookings``  -- reservations of a car by a renter for ``[start, end)``

Indexes
-------
* **B-Tree** on ``bookings.car_id`` / ``renter_id`` / ``state`` for the
  overlap query and access checks.
* The **GiST exclusion constraint** ``bookings_no_overlap`` is created by
  the migration (it needs ``btree_gist``) and is not part of ``metadata``
  so the models stay portable to SQLite in tests.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)

from .database import Base
from src.domain.enums import BookingState, CarState

BOOKING_OVERLAP_CONSTRAINT = "bookings_no_overlap"


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CarModel(Base):
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(120), nullable=False, default="")
    state = Column(Enum(CarState), default=CarState.LOCKED, nullable=False)
    license_plate = Column(String(20), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_cars_owner", "owner_id"),)


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    car_id = Column(
        Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False
    )
    renter_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    state = Column(Enum(BookingState), default=BookingState.PENDING, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_bookings_car", "car_id"),
        Index("idx_bookings_renter", "renter_id"),
        Index("idx_bookings_state", "state"),
    )
