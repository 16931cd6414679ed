"""FastAPI application for ShipDesk - admin API for users, carrier permissions and shipment pools."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from shipdesk.admin import admin_router, shipments_router
from shipdesk.auth.router import router as auth_router
from shipdesk.config import DEFAULT_JWT_SECRET, get_settings
from shipdesk.errors import register_exception_handlers
from shipdesk.middleware.rate_limit import limiter
from shipdesk.storage.database import Database, get_database, init_database

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting ShipDesk admin API...")
    settings = get_settings()
    logger.info(f"Environment: {settings.app_env}")

    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        if settings.is_production:
            raise RuntimeError("JWT_SECRET must be set in production")
        logger.warning("JWT_SECRET not configured - using the development default")

    await init_database()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down ShipDesk admin API...")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # HSTS header for production (HTTPS only)
        if get_settings().is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


def create_app() -> FastAPI:
    _configure_logging()
    settings = get_settings()

    app = FastAPI(
        title="ShipDesk Admin API",
        description="Admin authentication, user management, carrier permissions and shipment pools",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS based on environment
    if settings.is_production and settings.cors_origin_list:
        cors_origins = settings.cors_origin_list
    else:
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    # Rate limiting (slowapi reads the limiter from app state)
    app.state.limiter = limiter

    register_exception_handlers(app)

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(admin_router, prefix=settings.api_prefix)
    app.include_router(shipments_router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """Root endpoint - service info."""
        return {
            "service": "ShipDesk Admin API",
            "version": "1.0.0",
            "status": "operational",
            "api_prefix": settings.api_prefix,
        }

    @app.get("/health")
    async def health(db: Database = Depends(get_database)):
        """Health check endpoint."""
        database_ok = await db.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": "ok" if database_ok else "unavailable",
        }

    return app


app = create_app()
