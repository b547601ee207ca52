"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryIdentityStore
from src.adapters.repository.postgres import PostgresIdentityStore, run_migrations
from src.api.v1 import debug_router
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "OTP Authentication API v1 - Request and verify one-time passcodes",
    },

    {
        "name": "debug",
        "description": "Diagnostics for notification channels (disabled by default)",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the identity store (Postgres pool + migrations, or in-memory)
    - Closes the connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")

    pool = None
    if settings.identity_store.lower() == "memory":
        logger.warning("Using in-memory identity store; identities are lost on restart")
        app.state.identity_store = InMemoryIdentityStore()
    else:
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.identity_store = PostgresIdentityStore(pool)

    logger.info("Notification channel: %s", settings.email_provider)
    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="otpgate",
    description="Passwordless email OTP authentication API",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")
app.include_router(debug_router, prefix="/v1")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures; never echo internals to the caller."""
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with identity store validation.

    Returns 200 OK if application and store are healthy.
    Raises exception if the store is unreachable.
    """
    request.app.state.identity_store.ping()
    return {"status": "healthy"}
