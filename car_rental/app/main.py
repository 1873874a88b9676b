"""
FastAPI Application Entry Point.

This is the main application file for the Car Rental Service.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Depends
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError

from car_rental.app.core.config import settings
from car_rental.app.core.observability import ObservabilityMiddleware, configure_logging
from car_rental.app.api.router import router as api_router
from car_rental.app.api.deps import get_metrics_service, bounded
from car_rental.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from car_rental.app.schemas.metrics import HealthResponse, MetricsResponse
from car_rental.app.services.metrics import MetricsService, RequestMetrics
from car_rental.app.stores.factory import open_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Opens the rental store once (database, or memory if unreachable).
    2. Closes it on shutdown.
    """
    app.state.store = await open_store(settings)
    yield
    await app.state.store.close()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        description="Car fleet and rental agreement management",
        lifespan=lifespan,
    )
    app.state.metrics = RequestMetrics()

    app.add_middleware(ObservabilityMiddleware)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check():
        """
        Health check endpoint.

        Returns:
            dict: Status and server time
        """
        return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))

    @app.get("/metrics", tags=["Health"], response_model=MetricsResponse)
    async def metrics(service: MetricsService = Depends(get_metrics_service)):
        """Rental counts, revenue, uptime and request volume."""
        return await bounded(service.snapshot())

    # Include API router
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    uvicorn.run("car_rental.app.main:app", host="0.0.0.0", port=settings.port)
