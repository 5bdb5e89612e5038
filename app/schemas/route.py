"""
Route Pydantic schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.models.enums import RouteStatus
from app.schemas.base import BaseSchema, TimestampSchema
from app.schemas.order import OrderResponse


# =============================================================================
# Requests
# =============================================================================

class OptimizeRequest(BaseSchema):
    """Orders to compute a visit order for."""
    order_ids: list[int] = Field(
        ...,
        min_length=1,
        description="Order ids to route; duplicates keep their first occurrence",
    )


class LocationRequest(BaseSchema):
    """Truck position reported by the driver app."""
    current_location: str = Field(
        ...,
        description='Position as "<lat>,<lng>" with no whitespace',
        examples=["18.5,-69.9"],
    )


# =============================================================================
# Computed route
# =============================================================================

class ComputedStopResponse(BaseSchema):
    """One stop of a computed route."""
    order_id: int
    latitude: float
    longitude: float
    estimated_time_minutes: int = Field(
        ...,
        description="Handling time at this stop, in minutes",
    )
    distance_from_previous_km: float


class ComputeRouteResponse(BaseSchema):
    """
    Result of a route computation.

    ``rejected_orders`` maps each excluded order id to the reason its
    coordinates could not be used.
    """
    sequence: list[int]
    total_distance_km: float
    estimated_duration_minutes: int
    stops: list[ComputedStopResponse]
    return_distance_km: float
    rejected_orders: dict[int, str] = Field(default_factory=dict)

    @classmethod
    def from_outcome(cls, outcome) -> "ComputeRouteResponse":
        """Build from a ``RouteService.optimize`` outcome."""
        route = outcome.route
        return cls(
            sequence=list(route.sequence),
            total_distance_km=route.total_distance_km,
            estimated_duration_minutes=route.estimated_duration_minutes,
            stops=[
                ComputedStopResponse(
                    order_id=stop.order_id,
                    latitude=stop.point.latitude,
                    longitude=stop.point.longitude,
                    estimated_time_minutes=stop.service_duration_minutes,
                    distance_from_previous_km=stop.distance_from_previous_km,
                )
                for stop in route.stops
            ],
            return_distance_km=route.return_distance_km,
            rejected_orders=dict(outcome.rejected),
        )


# =============================================================================
# Persisted route
# =============================================================================

class RouteResponse(TimestampSchema):
    """Schema for route response."""
    id: int
    name: str
    status: RouteStatus
    version: int

    # Crew
    driver_id: Optional[int] = None
    assistant_id: Optional[int] = None
    truck_id: Optional[int] = None

    # Plan
    delivery_sequence: list[int] = Field(default_factory=list)
    total_distance_km: Optional[float] = None
    estimated_duration_minutes: Optional[int] = None

    # Progress
    current_location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("delivery_sequence", mode="before")
    @classmethod
    def _sequence_as_list(cls, v):
        return list(v or [])


class StartRouteResponse(BaseSchema):
    """Started route and the orders whose ETAs were recomputed."""
    route: RouteResponse
    orders: list[OrderResponse]
