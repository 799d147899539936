"""
FastAPI application entry point.

This is where:
- The FastAPI app is created
- Routes are registered
- Store errors are mapped to HTTP responses
- Startup/shutdown events are handled
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from eventviewer.api.routes_events import router as events_router
from eventviewer.core.config import settings
from eventviewer.core.db import engine
from eventviewer.core.errors import StoreError, StoreTimeoutError
from eventviewer.core.logging import configure_logging

logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN MANAGEMENT
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown.

    Startup: configure logging
    Shutdown: dispose of the connection pool
    """
    configure_logging(settings.log_level)
    logger.info("Starting Event Viewer API (query timeout %ss)", settings.query_timeout_seconds)

    yield

    await engine.dispose()
    logger.info("Event Viewer API stopped")


# =============================================================================
# CREATE APPLICATION
# =============================================================================


app = FastAPI(
    title="Event Viewer API",
    description="Read-only queries and aggregations over the monitoring event log",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================
# The repository raises StoreError for anything the database gets wrong.
# Timeouts are reported as 504, every other store failure as 503.


@app.exception_handler(StoreTimeoutError)
async def store_timeout_handler(request: Request, exc: StoreTimeoutError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content={"detail": "Event store timed out"},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("%s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Event store unavailable"},
    )


# =============================================================================
# REGISTER ROUTERS
# =============================================================================

app.include_router(
    events_router,
    prefix=settings.api_prefix,  # Full path: /api/events, /api/events/count, etc.
)


# =============================================================================
# HEALTH CHECK
# =============================================================================


@app.get(
    f"{settings.api_prefix}/health",
    tags=["Health"],
    summary="Health check",
)
async def health_check():
    """Check if the API service is running. Does not touch the database."""
    return {
        "status": "healthy",
        "service": "viewer_service",
    }
