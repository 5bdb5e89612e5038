"""
Route Builder: visit order and totals for a single truck.

Point layout used by the distance matrix and the tour:

    index 0        depot (departure)
    index 1..n     delivery points, in input order
    index n + 1    depot (return)

The tour is built with the nearest-neighbor heuristic. It is not optimal,
but it is deterministic: ties go to the stop that appears first in the input.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from app.core.exceptions import InvalidCoordinateFormat, NoValidStops
from app.services.routing.geo import DeliveryPoint, Point, distance_km
from app.services.routing.parameters import Depot, RoutingParameters, get_depot

logger = logging.getLogger(__name__)


class RoutableOrder(Protocol):
    """Minimal order shape the builder needs."""
    id: int
    delivery_coordinates: Optional[str]


@dataclass(frozen=True)
class RouteStop:
    """One delivery in the computed visit order."""
    sequence_index: int  # 1-based; 0 is the depot departure
    order_id: int
    point: DeliveryPoint
    service_duration_minutes: int
    distance_from_previous_km: float = 0.0


@dataclass(frozen=True)
class OptimizedRoute:
    """Result of a route computation (not the persisted route)."""
    sequence: tuple[int, ...]
    total_distance_km: float
    estimated_duration_minutes: int
    stops: tuple[RouteStop, ...]
    return_distance_km: float = 0.0

    @property
    def num_stops(self) -> int:
        return len(self.stops)


@dataclass(frozen=True)
class RouteBuildResult:
    """Optimized route plus the orders excluded from it."""
    route: OptimizedRoute
    rejected: dict[int, str] = field(default_factory=dict)


def collect_delivery_points(
    orders: Sequence[RoutableOrder],
) -> tuple[list[DeliveryPoint], dict[int, str]]:
    """
    Parse each order's coordinates, keeping input order.

    Returns:
        (valid points, rejected order id -> reason). Repeated order ids keep
        their first occurrence.
    """
    points: list[DeliveryPoint] = []
    rejected: dict[int, str] = {}
    seen: set[int] = set()

    for order in orders:
        if order.id in seen or order.id in rejected:
            logger.warning(f"Order {order.id} listed more than once; keeping first occurrence")
            continue
        try:
            points.append(DeliveryPoint.from_text(order.id, order.delivery_coordinates))
        except InvalidCoordinateFormat as e:
            rejected[order.id] = e.reason
            continue
        seen.add(order.id)

    return points, rejected


def compute_distance_matrix(points: Sequence[Point]) -> list[list[float]]:
    """
    Pairwise great-circle distances in km.

    Only the upper triangle is computed and mirrored, so the matrix is
    exactly symmetric with a zero diagonal.
    """
    n = len(points)
    matrix = [[0.0] * n for _ in range(n)]

    for i in range(n):
        for j in range(i + 1, n):
            d = distance_km(points[i], points[j])
            matrix[i][j] = d
            matrix[j][i] = d

    return matrix


def nearest_neighbor_tour(matrix: Sequence[Sequence[float]]) -> list[int]:
    """
    Visit order over the matrix layout described in the module docstring.

    Starts at index 0, repeatedly moves to the closest unvisited delivery
    index (strict ``<`` so the earliest index wins a tie) and ends at the
    return-depot index. The returned list includes both depot indices.
    """
    size = len(matrix)
    if size < 2:
        raise ValueError("Distance matrix must contain departure and return depots")

    return_index = size - 1
    unvisited = list(range(1, return_index))
    tour = [0]
    current = 0

    while unvisited:
        nearest = unvisited[0]
        min_dist = matrix[current][nearest]
        for candidate in unvisited[1:]:
            if matrix[current][candidate] < min_dist:
                nearest = candidate
                min_dist = matrix[current][candidate]

        unvisited.remove(nearest)
        tour.append(nearest)
        current = nearest

    tour.append(return_index)
    return tour


def estimate_duration_minutes(
    total_distance_km: float,
    num_stops: int,
    params: RoutingParameters,
) -> int:
    """Driving time (rounded up) plus fixed handling time per stop."""
    travel_minutes = math.ceil(total_distance_km / params.average_speed_kmh * 60)
    return travel_minutes + num_stops * params.service_duration_minutes


def build_route(
    orders: Sequence[RoutableOrder],
    depot: Optional[Depot] = None,
    params: Optional[RoutingParameters] = None,
) -> RouteBuildResult:
    """
    Compute visit sequence, distance and duration for a set of orders.

    Orders without parseable coordinates are excluded and reported in
    ``RouteBuildResult.rejected``.

    Raises:
        NoValidStops: If no order has usable coordinates.
    """
    depot = depot or get_depot()
    params = params or RoutingParameters.from_settings()

    delivery_points, rejected = collect_delivery_points(orders)
    if not delivery_points:
        raise NoValidStops([o.id for o in orders], rejected)

    points: list[Point] = [depot, *delivery_points, depot]
    matrix = compute_distance_matrix(points)
    tour = nearest_neighbor_tour(matrix)

    stops: list[RouteStop] = []
    total_distance = 0.0
    for position in range(1, len(tour)):
        prev_index, index = tour[position - 1], tour[position]
        leg = matrix[prev_index][index]
        total_distance += leg
        if index == len(points) - 1:
            break
        point = points[index]
        stops.append(
            RouteStop(
                sequence_index=position,
                order_id=point.order_id,
                point=point,
                service_duration_minutes=params.service_duration_minutes,
                distance_from_previous_km=leg,
            )
        )

    return_leg = matrix[tour[-2]][tour[-1]]

    route = OptimizedRoute(
        sequence=tuple(stop.order_id for stop in stops),
        total_distance_km=round(total_distance, params.distance_precision),
        estimated_duration_minutes=estimate_duration_minutes(
            total_distance, len(stops), params
        ),
        stops=tuple(stops),
        return_distance_km=return_leg,
    )

    logger.info(
        f"Built route with {route.num_stops} stops: "
        f"{route.total_distance_km} km, {route.estimated_duration_minutes} min "
        f"({len(rejected)} order(s) excluded)"
    )
    return RouteBuildResult(route=route, rejected=rejected)
