"""
Delivery routing package.

Nearest-neighbor route building, position-based ETAs and the route/order
lifecycle, fronted by ``RouteService``.
"""

from app.services.routing.geo import (
    GeoPoint,
    DeliveryPoint,
    parse_coordinates,
    format_coordinates,
    distance_km,
)
from app.services.routing.builder import (
    RouteStop,
    OptimizedRoute,
    RouteBuildResult,
    build_route,
    compute_distance_matrix,
    nearest_neighbor_tour,
)
from app.services.routing.eta import StopEstimate, propagate_etas
from app.services.routing.parameters import Depot, RoutingParameters, get_depot
from app.services.routing.records import OrderSnapshot, RouteSnapshot
from app.services.routing.service import (
    RouteService,
    OptimizationOutcome,
    StartRouteOutcome,
)

__all__ = [
    # Geo
    "GeoPoint",
    "DeliveryPoint",
    "parse_coordinates",
    "format_coordinates",
    "distance_km",
    # Builder
    "RouteStop",
    "OptimizedRoute",
    "RouteBuildResult",
    "build_route",
    "compute_distance_matrix",
    "nearest_neighbor_tour",
    # ETA
    "StopEstimate",
    "propagate_etas",
    # Parameters
    "Depot",
    "RoutingParameters",
    "get_depot",
    # Records
    "OrderSnapshot",
    "RouteSnapshot",
    # Service
    "RouteService",
    "OptimizationOutcome",
    "StartRouteOutcome",
]
