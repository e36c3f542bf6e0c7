"""
FastAPI Application Entry Point.

This is the main application file for the Delivery Pricing Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from delivery_pricing.app.core.config import settings
from delivery_pricing.app.core.logging_config import setup_logging
from delivery_pricing.app.core.observability import ObservabilityMiddleware
from delivery_pricing.app.api.v1.router import router as api_v1_router
from delivery_pricing.app.db.session import engine, Base
from delivery_pricing.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from delivery_pricing.app.models.distance_bracket import DistanceBracket
from delivery_pricing.app.models.holiday import Holiday
from delivery_pricing.app.models.holiday_surcharge import HolidaySurcharge
from delivery_pricing.app.models.peak_hour import PeakHour
from delivery_pricing.app.models.surge_pricing import SurgePricing
from delivery_pricing.app.models.area_zone import AreaZone, SurgePricingAreaZone

setup_logging(settings.log_level, settings.log_json)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates the rule tables when ``db_create_tables`` is set (local
    development); in production the admin platform owns the schema.
    """
    if settings.db_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Rule tables created")
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Delivery charge pricing service for the multi-tenant delivery platform",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API router
app.include_router(api_v1_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Delivery Pricing Backend API",
        "docs": "/docs",
        "health": "/health",
    }
