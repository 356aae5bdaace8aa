"""
Async SQLAlchemy engine, session factory and transaction boundary.

Uses ``asyncpg`` as the PostgreSQL driver for non-blocking I/O.  The
engine opens every connection at ``settings.transaction_isolation``
(SERIALIZABLE by default) so that the booking engine's
check-then-insert sequence cannot interleave with another transaction
on the same car.
"""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.config import settings
from src.domain.repositories import Database

T = TypeVar("T")

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    isolation_level=settings.transaction_isolation,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class SqlAlchemyDatabase(Database):
    """``Database`` backed by an ``AsyncSession`` per transaction."""

    def __init__(self, session_factory: async_sessionmaker = async_session_factory):
        self.session_factory = session_factory

    async def transactional(self, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Commit on success, rollback on error."""
        async with self.session_factory() as session:
            async with session.begin():
                return await fn(session)


# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_retryable_conflict(exc: DBAPIError) -> bool:
    """True when the store aborted the transaction in favour of a concurrent one."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code in RETRYABLE_SQLSTATES
