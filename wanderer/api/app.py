"""
FastAPI application factory.

* Registers routes for users, guides, connections, places, itineraries,
  bookings and admin.
* Maps typed domain errors to HTTP responses.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from wanderer.api.errors import register_error_handlers
from wanderer.api.middleware import limiter
from wanderer.api.routes import (
    admin,
    bookings,
    connections,
    guides,
    itineraries,
    places,
    users,
)
from wanderer.config import settings
from wanderer.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled DB connections on shutdown."""
    logger.info("Maharashtra Wanderer API starting")
    yield
    await engine.dispose()
    logger.info("Maharashtra Wanderer API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Maharashtra Wanderer API",
        description=(
            "Connects tourists with local guides across Maharashtra: "
            "nearby-guide discovery, connection requests and their "
            "accept / decline / cancel lifecycle, the attraction catalogue, "
            "trip itineraries and guide bookings."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_error_handlers(app)

    # Routers
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(guides.router, prefix="/api/v1")
    app.include_router(connections.router, prefix="/api/v1")
    app.include_router(places.router, prefix="/api/v1")
    app.include_router(itineraries.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
