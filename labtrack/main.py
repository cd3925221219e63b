"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from labtrack.core.config import Settings, settings as default_settings
from labtrack.core.exceptions import LabTrackError
from labtrack.core.middleware import setup_middleware
from labtrack.core.rate_limiter import limiter
from labtrack.db.session import Database

from labtrack.api.auth import router as auth_router
from labtrack.api.devices import router as devices_router
from labtrack.api.device_logs import router as device_logs_router
from labtrack.api.users import router as users_router
from labtrack.api.regions import router as regions_router
from labtrack.api.schools import router as schools_router
from labtrack.api.locations import router as locations_router

logger = logging.getLogger("labtrack")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application around one explicitly owned database handle.

    Served through uvicorn's factory mode: ``labtrack.main:create_app``.
    """
    settings = settings or default_settings
    configure_logging(settings)
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("🚀 Starting %s API", settings.APP_NAME)
        database.create_all()
        logger.info("✅ Database tables ready")

        yield

        database.dispose()
        logger.info("🔻 Shutting down %s API", settings.APP_NAME)

    app = FastAPI(
        title="LabTrack API",
        description="School lab device tracking with an append-only activity log",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.db = database

    # Middleware
    setup_middleware(app, settings)

    # Rate limiting
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(LabTrackError)
    async def labtrack_exception_handler(request: Request, exc: LabTrackError):
        if exc.status_code >= 500:
            logger.error("Unhandled storage error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    # Register routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(devices_router, prefix="/api")
    app.include_router(device_logs_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(regions_router, prefix="/api")
    app.include_router(schools_router, prefix="/api")
    app.include_router(locations_router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": "0.1.0",
            "docs": "/docs",
        }

    @app.get("/api/health")
    async def health():
        """Quick health check endpoint."""
        return {"status": "ok"}

    return app

