"""
Immutable route/order records exchanged with the persistence layer.

Repositories hand these out and accept field dicts back; the routing core
never holds ORM objects.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from app.models.enums import OrderStatus, RouteStatus


@dataclass(frozen=True)
class OrderSnapshot:
    """Routing-relevant view of an order row."""
    id: int
    status: OrderStatus
    delivery_coordinates: Optional[str] = None
    estimated_delivery_time: Optional[datetime] = None
    delivery_sequence: Optional[int] = None
    route_id: Optional[int] = None
    customer_id: Optional[int] = None
    total: Optional[Decimal] = None

    def with_fields(self, **fields: Any) -> "OrderSnapshot":
        """Return a copy with *fields* applied."""
        return replace(self, **fields)


@dataclass(frozen=True)
class RouteSnapshot:
    """Routing-relevant view of a route row."""
    id: int
    status: RouteStatus
    name: str = ""
    driver_id: Optional[int] = None
    assistant_id: Optional[int] = None
    truck_id: Optional[int] = None
    delivery_sequence: tuple[int, ...] = field(default_factory=tuple)
    current_location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    last_update: Optional[datetime] = None
    total_distance_km: Optional[Decimal] = None
    estimated_duration_minutes: Optional[int] = None
    version: int = 1

    def with_fields(self, **fields: Any) -> "RouteSnapshot":
        """Return a copy with *fields* applied."""
        if "delivery_sequence" in fields and fields["delivery_sequence"] is not None:
            fields["delivery_sequence"] = tuple(fields["delivery_sequence"])
        return replace(self, **fields)
