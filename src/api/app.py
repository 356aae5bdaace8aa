"""
FastAPI application factory.

* Registers routes for bookings and admin.
* Maps domain errors to HTTP responses.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DBAPIError

from src.api.middleware import limiter
from src.api.routes import admin, bookings
from src.config import settings
from src.domain.exceptions import (
    AccessDeniedError,
    BookingDomainError,
    CarNotAvailableError,
    InvalidDatesError,
    InvalidStateTransitionError,
    NotFoundError,
)
from src.infrastructure.database import is_retryable_conflict

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Most specific first; BookingDomainError is the fallback
ERROR_STATUS: dict[type[BookingDomainError], int] = {
    InvalidDatesError: 400,
    AccessDeniedError: 403,
    NotFoundError: 404,
    CarNotAvailableError: 409,
    InvalidStateTransitionError: 409,
}


async def domain_error_handler(request: Request, exc: BookingDomainError):
    status_code = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)),
        400,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def database_error_handler(request: Request, exc: DBAPIError):
    """Lost serialization races become 409 so clients know to retry."""
    if not is_retryable_conflict(exc):
        raise exc
    logger.warning("Transaction conflict on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=409,
        content={"detail": "Concurrent booking conflict, please retry"},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Car Sharing Booking API",
        description=(
            "Peer-to-peer car rental bookings: owners list cars, renters "
            "reserve them for date ranges, and the booking lifecycle "
            "(PENDING -> CONFIRMED -> PICKED_UP -> RETURNED, or CANCELED) "
            "is enforced per role."
        ),
        version="1.0.0",
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    app.add_exception_handler(BookingDomainError, domain_error_handler)
    app.add_exception_handler(DBAPIError, database_error_handler)

    # Routers
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
