"""
Main FastAPI application for the Flood Watch service.

This module contains the FastAPI application instance, wires the flood
monitor and its refresh scheduler, and registers the routers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from floodwatch.config import settings
from floodwatch.database import async_session, create_tables
from floodwatch.routers.cron import router as cron_router
from floodwatch.routers.feeds import router as feeds_router
from floodwatch.routers.history import router as history_router
from floodwatch.routers.monitor import router as monitor_router
from floodwatch.services.feeds import FeedClient, UpstreamFetchError
from floodwatch.services.monitor import DatabaseSink, FloodMonitor
from floodwatch.services.scheduler import RefreshScheduler
from floodwatch.utils.logging_config import setup_logging, get_logger

# Import all models so their tables are registered with Base.metadata
import floodwatch.models  # noqa: F401

setup_logging()
logger = get_logger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

monitor = FloodMonitor.from_settings(FeedClient(), sink=DatabaseSink(async_session))
scheduler = RefreshScheduler(monitor, settings.REFRESH_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events. SQLite databases get their tables
    created on startup; PostgreSQL deployments are managed through Alembic.
    """
    logger.info("=" * 60)
    logger.info("Flood Watch - Application starting up")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Database: {settings.SQLALCHEMY_DATABASE_URI.split('://')[0]}")
    logger.info("=" * 60)

    if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
        await create_tables()
    else:
        logger.warning("Remember to run 'alembic upgrade head' to apply database migrations")

    if settings.SCHEDULER_ENABLED:
        scheduler.start()

    yield

    await scheduler.stop()
    logger.info("=" * 60)
    logger.info("Flood Watch - Application shutting down")
    logger.info("=" * 60)


app = FastAPI(
    title="Flood Watch API",
    description="Fuses rain gauges, flood-risk zones and hazard alerts into a live flood severity",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.state.monitor = monitor
app.state.scheduler = scheduler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(UpstreamFetchError)
async def upstream_exception_handler(request: Request, exc: UpstreamFetchError):
    """Report upstream feed failures as 502 Bad Gateway."""
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "detail": f"Upstream fetch failed ({exc.feed})",
            "error": exc.message,
        },
    )


if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )


@app.get("/")
@limiter.limit(f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW}seconds")
async def root(request: Request):
    """
    Root endpoint returning API information.
    """
    return {
        "message": "Welcome to Flood Watch API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
@limiter.limit("60/minute")
async def health_check(request: Request):
    """
    Health check endpoint.

    Rate limit: 60 requests per minute
    """
    return {
        "status": "healthy",
        "scheduler_running": scheduler.running,
        "last_refresh": monitor.last_refresh,
    }


app.include_router(feeds_router, prefix=settings.API_V1_STR)
app.include_router(cron_router, prefix=settings.API_V1_STR)
app.include_router(history_router, prefix=settings.API_V1_STR)
app.include_router(monitor_router, prefix=settings.API_V1_STR)
