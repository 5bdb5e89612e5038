"""
SQLAlchemy-backed repositories.

Each repository works inside the caller's session; committing is left to
the session owner (``get_session`` for API requests).
"""
import logging
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConcurrentModification, NotFound, PersistenceFailure
from app.models import Order, Route
from app.services.routing.records import OrderSnapshot, RouteSnapshot

logger = logging.getLogger(__name__)

ORDER_WRITABLE_FIELDS = frozenset({
    "status",
    "estimated_delivery_time",
    "delivery_sequence",
    "route_id",
})

ROUTE_WRITABLE_FIELDS = frozenset({
    "status",
    "delivery_sequence",
    "current_location",
    "start_time",
    "end_time",
    "last_update",
    "total_distance_km",
    "estimated_duration_minutes",
})


def order_to_snapshot(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        id=order.id,
        status=order.status,
        delivery_coordinates=order.delivery_coordinates,
        estimated_delivery_time=order.estimated_delivery_time,
        delivery_sequence=order.delivery_sequence,
        route_id=order.route_id,
        customer_id=order.customer_id,
        total=order.total,
    )


def route_to_snapshot(route: Route) -> RouteSnapshot:
    return RouteSnapshot(
        id=route.id,
        status=route.status,
        name=route.name,
        driver_id=route.driver_id,
        assistant_id=route.assistant_id,
        truck_id=route.truck_id,
        delivery_sequence=tuple(int(oid) for oid in (route.delivery_sequence or [])),
        current_location=route.current_location,
        start_time=route.start_time,
        end_time=route.end_time,
        last_update=route.last_update,
        total_distance_km=route.total_distance_km,
        estimated_duration_minutes=route.estimated_duration_minutes,
        version=route.version,
    )


def _check_fields(entity: str, fields: dict[str, Any], writable: frozenset[str]) -> None:
    unknown = set(fields) - writable
    if unknown:
        raise ValueError(f"Fields not writable on {entity}: {sorted(unknown)}")


class SqlOrderRepository:
    """Order repository over a SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    def _load(self, order_id: int) -> Order:
        try:
            order = self.session.get(Order, order_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load order {order_id}: {e}")
            raise PersistenceFailure("get", "order", order_id, detail=type(e).__name__) from e
        if order is None:
            raise NotFound("order", order_id)
        return order

    def get_order(self, order_id: int) -> OrderSnapshot:
        return order_to_snapshot(self._load(order_id))

    def list_orders(self) -> list[OrderSnapshot]:
        try:
            result = self.session.execute(select(Order).order_by(Order.id))
            return [order_to_snapshot(o) for o in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list orders: {e}")
            raise PersistenceFailure("list", "order", detail=type(e).__name__) from e

    def update_order_fields(self, order_id: int, fields: dict[str, Any]) -> OrderSnapshot:
        _check_fields("order", fields, ORDER_WRITABLE_FIELDS)
        order = self._load(order_id)
        try:
            for name, value in fields.items():
                setattr(order, name, value)
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            raise PersistenceFailure("update", "order", order_id, detail=type(e).__name__) from e
        return order_to_snapshot(order)


class SqlRouteRepository:
    """Route repository over a SQLAlchemy session with optimistic versioning."""

    def __init__(self, session: Session):
        self.session = session

    def _load(self, route_id: int) -> Route:
        try:
            route = self.session.get(Route, route_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load route {route_id}: {e}")
            raise PersistenceFailure("get", "route", route_id, detail=type(e).__name__) from e
        if route is None:
            raise NotFound("route", route_id)
        return route

    def get_route(self, route_id: int) -> RouteSnapshot:
        return route_to_snapshot(self._load(route_id))

    def update_route_fields(
        self,
        route_id: int,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> RouteSnapshot:
        _check_fields("route", fields, ROUTE_WRITABLE_FIELDS)
        values = dict(fields)
        if values.get("delivery_sequence") is not None:
            values["delivery_sequence"] = [int(oid) for oid in values["delivery_sequence"]]
        if values.get("total_distance_km") is not None:
            values["total_distance_km"] = Decimal(str(values["total_distance_km"]))

        route = self._load(route_id)
        version = route.version if expected_version is None else expected_version

        stmt = (
            update(Route)
            .where(Route.id == route_id, Route.version == version)
            .values(**values, version=version + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update route {route_id}: {e}")
            raise PersistenceFailure("update", "route", route_id, detail=type(e).__name__) from e

        if result.rowcount == 0:
            logger.warning(f"Route {route_id} changed concurrently (expected v{version})")
            raise ConcurrentModification("route", route_id, version)

        self.session.refresh(route)
        return route_to_snapshot(route)
