"""
API v1 router aggregation.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import orders, routes
from app.schemas.base import ErrorResponse

# Documented error bodies (rendered by the error handlers in app.main)
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "No routable orders"},
    404: {"model": ErrorResponse, "description": "Route or order not found"},
    409: {"model": ErrorResponse, "description": "Invalid transition or concurrent update"},
    422: {"model": ErrorResponse, "description": "Invalid coordinates or request body"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    routes.router,
    prefix="/routes",
    tags=["Routes"],
    responses=ERROR_RESPONSES,
)

api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["Orders"],
    responses=ERROR_RESPONSES,
)
