"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from subway import __version__
from subway.api import lines, stations
from subway.core.config import settings
from subway.core.database import get_engine
from subway.core.logging import configure_logging
from subway.core.telemetry import get_tracer_provider, shutdown_tracer_provider
from subway.middleware import AccessLoggingMiddleware
from subway.models import Base

# Configure logging at module level so Uvicorn startup logs go through structlog pipeline
configure_logging(log_level=settings.LOG_LEVEL)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - initialize OTEL TracerProvider and prepare the database."""
    # Installed before the first request so service spans are exported
    if settings.OTEL_ENABLED and (provider := get_tracer_provider()):
        trace.set_tracer_provider(provider)
        logger.info("otel_tracer_provider_initialized")

    logger.info("startup_initializing", message="checking database")
    try:
        async with get_engine().begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("database_connection_successful")

            if settings.DATABASE_CREATE_TABLES:
                await conn.run_sync(Base.metadata.create_all)
                logger.info("database_tables_ready")
    except (SQLAlchemyError, OSError) as e:
        logger.error("startup_failed", error=str(e))
        raise

    logger.info("startup_complete")

    yield

    logger.info("shutdown_starting")
    if settings.OTEL_ENABLED:
        shutdown_tracer_provider()
    await get_engine().dispose()
    logger.info("shutdown_complete")


app = FastAPI(
    title="Subway Lines API",
    description="Subway line and section management",
    version=__version__,
    lifespan=lifespan,
)

# Instrumentor wraps the ASGI application to create HTTP request spans
if settings.OTEL_ENABLED:
    FastAPIInstrumentor().instrument_app(
        app,
        excluded_urls=",".join(settings.OTEL_EXCLUDED_URLS),
    )
    logger.info("otel_fastapi_instrumented", excluded_urls=settings.OTEL_EXCLUDED_URLS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Access logging middleware (replaces uvicorn.access logs with structlog)
app.add_middleware(AccessLoggingMiddleware)

app.include_router(stations.router, prefix=settings.API_V1_PREFIX)
app.include_router(lines.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Subway Lines API", "version": __version__}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """
    Readiness check endpoint - verify the database answers.

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    try:
        async with get_engine().begin() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("readiness_check_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable.",
        ) from e
    return {"status": "ready"}
