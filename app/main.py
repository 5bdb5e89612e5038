"""
FastAPI application entry point for GoWater Dispatch.

Route optimization and route/order lifecycle API for the water delivery
fleet.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import (
    ConcurrentModification,
    DispatchError,
    InvalidCoordinateFormat,
    InvalidTransition,
    NotFound,
    NoValidStops,
    PersistenceFailure,
)
from app.core.logging_config import configure_logging
from app.api.v1 import api_router

logger = logging.getLogger(__name__)

# Most specific class first; resolved along the exception's MRO
ERROR_STATUS_CODES: dict[type[DispatchError], int] = {
    InvalidCoordinateFormat: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoValidStops: status.HTTP_400_BAD_REQUEST,
    InvalidTransition: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    ConcurrentModification: status.HTTP_409_CONFLICT,
    PersistenceFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: DispatchError) -> int:
    """HTTP status for a dispatch error."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def dispatch_error_handler(request: Request, exc: DispatchError) -> JSONResponse:
    """Render a domain error as ``{"error", "message", "context"}``."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code} ({exc.code})")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures in the same shape as domain errors."""
    errors = jsonable_encoder(exc.errors())
    logger.info(f"{request.method} {request.url.path} -> 422 ({len(errors)} validation error(s))")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "request_validation",
            "message": "Request is invalid",
            "context": {"errors": errors},
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    # Note: tables are created by Alembic migrations, not here
    configure_logging(settings.log_level)
    logger.info(f"{settings.app_name} {settings.app_version} starting")
    yield
    # Shutdown
    logger.info(f"{settings.app_name} shutting down")


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## GoWater Dispatch

        Delivery routing for the water truck fleet:

        - **Route computation**: nearest-neighbor visit order from the depot
        - **Dispatch**: start a planned route and re-anchor delivery estimates
        - **Tracking**: truck position reports and route completion
        - **Order lifecycle**: in transit, delivered, cancelled

        Coordinates are exchanged as `"<lat>,<lng>"` text.
        """,
        version=settings.app_version,
        debug=settings.debug,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DispatchError, dispatch_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


# Create application instance
app = create_application()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": f"{settings.api_v1_prefix}/docs",
        "openapi": f"{settings.api_v1_prefix}/openapi.json",
    }
