"""
Pydantic schemas for API request/response validation.
"""

from app.schemas.base import BaseSchema, ErrorResponse
from app.schemas.order import OrderResponse
from app.schemas.route import (
    OptimizeRequest,
    LocationRequest,
    ComputedStopResponse,
    ComputeRouteResponse,
    RouteResponse,
    StartRouteResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "ErrorResponse",
    # Order
    "OrderResponse",
    # Route
    "OptimizeRequest",
    "LocationRequest",
    "ComputedStopResponse",
    "ComputeRouteResponse",
    "RouteResponse",
    "StartRouteResponse",
]
