"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are portable; only the
PostgreSQL exclusion constraint (created by the migration) is absent, so
overlap protection in these tests comes from the engine's own check.

Seed data
---------
* user 1 (``OWNER_ID``)    -- owns cars 1 and 2
* user 2 (``RENTER_ID``)   -- books cars
* user 3 (``STRANGER_ID``) -- unrelated to any booking
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.domain.entities import Car
from src.infrastructure.database import Base, SqlAlchemyDatabase
from src.infrastructure.memory import (
    InMemoryBookingRepository,
    InMemoryCarRepository,
    InMemoryDatabase,
    InMemoryStore,
)
from src.infrastructure.models import CarModel, UserModel
from src.services.booking_service import BookingService
from tests.helpers import CAR_ID, OTHER_CAR_ID, OWNER_ID, RENTER_ID, STRANGER_ID


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh engine per test: create tables, seed users/cars, dispose after."""
    engine = create_async_engine(TEST_DB_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                UserModel(id=OWNER_ID, name="Olivia Owner", email="owner@example.com"),
                UserModel(id=RENTER_ID, name="Ravi Renter", email="renter@example.com"),
                UserModel(id=STRANGER_ID, name="Sam Stranger", email="sam@example.com"),
                CarModel(id=CAR_ID, owner_id=OWNER_ID, name="Golf", license_plate="B-CS-1"),
                CarModel(id=OTHER_CAR_ID, owner_id=OWNER_ID, name="Polo", license_plate="B-CS-2"),
            ]
        )
        await session.commit()

    yield factory

    await engine.dispose()


@pytest.fixture
def sql_database(session_factory) -> SqlAlchemyDatabase:
    return SqlAlchemyDatabase(session_factory)


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_car(Car(id=CAR_ID, owner_id=OWNER_ID, name="Golf"))
    store.add_car(Car(id=OTHER_CAR_ID, owner_id=OWNER_ID, name="Polo"))
    return store


@pytest.fixture
def service(store) -> BookingService:
    """Booking service wired to the in-memory repositories."""
    return BookingService(
        InMemoryBookingRepository(),
        InMemoryCarRepository(),
        InMemoryDatabase(store),
    )
