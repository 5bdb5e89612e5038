"""
Route and order lifecycle transitions.

Every transition validates the current status first and only then builds
the field changes. Inputs are immutable snapshots, so a rejected transition
cannot leave anything half-applied; persisting the returned fields is the
caller's job.

Route:  pending -> in_progress -> completed
Order:  pending -> in_transit -> delivered
        pending | in_transit -> cancelled
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from app.core.exceptions import InvalidCoordinateFormat, InvalidTransition
from app.models.enums import OrderStatus, RouteStatus
from app.services.routing.eta import propagate_etas
from app.services.routing.geo import parse_coordinates
from app.services.routing.parameters import RoutingParameters
from app.services.routing.records import OrderSnapshot, RouteSnapshot

logger = logging.getLogger(__name__)


# action -> (allowed current statuses, resulting status)
ROUTE_TRANSITIONS: dict[str, tuple[frozenset[RouteStatus], RouteStatus]] = {
    "start": (frozenset({RouteStatus.PENDING}), RouteStatus.IN_PROGRESS),
    "report_location": (frozenset({RouteStatus.IN_PROGRESS}), RouteStatus.IN_PROGRESS),
    "complete": (frozenset({RouteStatus.IN_PROGRESS}), RouteStatus.COMPLETED),
}

ORDER_TRANSITIONS: dict[str, tuple[frozenset[OrderStatus], OrderStatus]] = {
    "mark_in_transit": (frozenset({OrderStatus.PENDING}), OrderStatus.IN_TRANSIT),
    "mark_delivered": (frozenset({OrderStatus.IN_TRANSIT}), OrderStatus.DELIVERED),
    "cancel": (
        frozenset({OrderStatus.PENDING, OrderStatus.IN_TRANSIT}),
        OrderStatus.CANCELLED,
    ),
}


@dataclass(frozen=True)
class RouteTransition:
    """Field changes produced by a route action."""
    action: str
    route: RouteSnapshot  # route as it will look once persisted
    route_fields: dict[str, Any]
    order_fields: dict[int, dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderTransition:
    """Field changes produced by an order action."""
    action: str
    order: OrderSnapshot
    order_fields: dict[str, Any]


def _sorted_values(statuses: Iterable) -> list[str]:
    return sorted(s.value for s in statuses)


def _check_route(route: RouteSnapshot, action: str) -> RouteStatus:
    allowed, target = ROUTE_TRANSITIONS[action]
    if route.status not in allowed:
        logger.warning(
            f"Rejected {action} on route {route.id}: status is {route.status.value}"
        )
        raise InvalidTransition(
            "route",
            route.id,
            action,
            route.status.value,
            _sorted_values(allowed),
            terminal=route.status.is_terminal,
        )
    return target


def _check_order(order: OrderSnapshot, action: str) -> OrderStatus:
    allowed, target = ORDER_TRANSITIONS[action]
    if order.status not in allowed:
        logger.warning(
            f"Rejected {action} on order {order.id}: status is {order.status.value}"
        )
        raise InvalidTransition(
            "order",
            order.id,
            action,
            order.status.value,
            _sorted_values(allowed),
            terminal=order.status.is_terminal,
        )
    return target


def _parse_location(route: RouteSnapshot, action: str, current_location: str) -> None:
    try:
        parse_coordinates(current_location)
    except InvalidCoordinateFormat as e:
        raise InvalidCoordinateFormat(
            e.value, e.reason, route_id=route.id, action=action
        ) from e


# =============================================================================
# Route actions
# =============================================================================

def start_route(
    route: RouteSnapshot,
    current_location: str,
    orders: Iterable[OrderSnapshot],
    now: datetime,
    params: Optional[RoutingParameters] = None,
) -> RouteTransition:
    """
    Dispatch a pending route and re-anchor its delivery estimates at *now*.

    Only orders referenced by the route's delivery sequence receive new
    ``estimated_delivery_time`` / ``delivery_sequence`` values.

    Raises:
        InvalidTransition: If the route is not pending.
        InvalidCoordinateFormat: If *current_location* is malformed.
    """
    target = _check_route(route, "start")
    _parse_location(route, "start", current_location)

    route_fields: dict[str, Any] = {
        "status": target,
        "start_time": route.start_time or now,
        "current_location": current_location,
        "last_update": now,
    }

    estimates = propagate_etas(route.delivery_sequence, now, params=params)
    order_fields = {
        order.id: estimates[order.id].as_fields()
        for order in orders
        if order.id in estimates
    }

    logger.info(
        f"Route {route.id}: {route.status.value} -> {target.value}, "
        f"{len(order_fields)} ETA(s) recomputed"
    )
    return RouteTransition(
        action="start",
        route=route.with_fields(**route_fields),
        route_fields=route_fields,
        order_fields=order_fields,
    )


def report_location(
    route: RouteSnapshot,
    current_location: str,
    now: datetime,
) -> RouteTransition:
    """
    Record a progress report for a route on the road.

    ETAs are intentionally left as computed at start.

    Raises:
        InvalidTransition: If the route is not in progress.
        InvalidCoordinateFormat: If *current_location* is malformed.
    """
    _check_route(route, "report_location")
    _parse_location(route, "report_location", current_location)

    route_fields: dict[str, Any] = {
        "current_location": current_location,
        "last_update": now,
    }
    logger.debug(f"Route {route.id}: location {current_location}")
    return RouteTransition(
        action="report_location",
        route=route.with_fields(**route_fields),
        route_fields=route_fields,
    )


def complete_route(
    route: RouteSnapshot,
    current_location: str,
    now: datetime,
) -> RouteTransition:
    """
    Close a route that is in progress.

    Raises:
        InvalidTransition: If the route is not in progress.
        InvalidCoordinateFormat: If *current_location* is malformed.
    """
    target = _check_route(route, "complete")
    _parse_location(route, "complete", current_location)

    route_fields: dict[str, Any] = {
        "status": target,
        "end_time": now,
        "current_location": current_location,
        "last_update": now,
    }
    logger.info(f"Route {route.id}: {route.status.value} -> {target.value}")
    return RouteTransition(
        action="complete",
        route=route.with_fields(**route_fields),
        route_fields=route_fields,
    )


# =============================================================================
# Order actions
# =============================================================================

def _order_transition(order: OrderSnapshot, action: str) -> OrderTransition:
    target = _check_order(order, action)
    order_fields = {"status": target}
    logger.info(f"Order {order.id}: {order.status.value} -> {target.value}")
    return OrderTransition(
        action=action,
        order=order.with_fields(**order_fields),
        order_fields=order_fields,
    )


def mark_in_transit(order: OrderSnapshot) -> OrderTransition:
    """Order loaded on a truck. Allowed from pending."""
    return _order_transition(order, "mark_in_transit")


def mark_delivered(order: OrderSnapshot) -> OrderTransition:
    """Order handed to the customer. Allowed from in_transit."""
    return _order_transition(order, "mark_delivered")


def cancel_order(order: OrderSnapshot) -> OrderTransition:
    """Order cancelled. Allowed from pending or in_transit."""
    return _order_transition(order, "cancel")
