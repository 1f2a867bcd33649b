"""
Event Planner Booking API - Main Application Entry Point

Booking subsystem of the event-planning marketplace:
- Vendor service bookings with price snapshots and per-type pricing
- Scheduling-conflict detection with service-row locking
- Status lifecycle pending -> confirmed -> in_progress -> completed/cancelled
- Role-scoped listing and statistics (customer, vendor, manager, admin)
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventplanner.core.config import get_settings
from eventplanner.core.logging import setup_logging, get_logger
from eventplanner.core.metrics import metrics_endpoint
from eventplanner.api.router import api_router
from eventplanner.api.errors import register_exception_handlers
from eventplanner.api.middleware import RequestLoggingMiddleware
from eventplanner.services.cache_service import get_redis, close_redis, get_cache_status

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        slot_locking=settings.BOOKING_SLOT_LOCKING,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Stats overview served without cache")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Vendor service bookings for the event-planning marketplace",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": await get_cache_status(),
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
