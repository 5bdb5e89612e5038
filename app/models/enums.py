"""
Enum type definitions for GoWater Dispatch.

Values are the lowercase strings already stored by the dashboard, and map
directly to the PostgreSQL ENUM types created by the baseline migration.
"""
from enum import Enum


class RouteStatus(str, Enum):
    """
    Route lifecycle status.

    Forward-only: pending -> in_progress -> completed.
    """
    PENDING = "pending"          # Planned, truck not yet dispatched
    IN_PROGRESS = "in_progress"  # Truck on the road
    COMPLETED = "completed"      # Truck back, route closed

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self == RouteStatus.COMPLETED


class OrderStatus(str, Enum):
    """
    Order delivery status.

    pending -> in_transit -> delivered, with cancellation allowed from
    pending and in_transit. delivered and cancelled are terminal.
    """
    PENDING = "pending"        # Waiting for a route
    IN_TRANSIT = "in_transit"  # Loaded on a truck
    DELIVERED = "delivered"    # Handed to the customer
    CANCELLED = "cancelled"    # Cancelled by customer/office

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentMethod(str, Enum):
    """How the customer pays on delivery."""
    CASH = "cash"
    CHECK = "check"
    CREDIT_CARD = "credit_card"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Column values for ``sqlalchemy.Enum(..., values_callable=...)``."""
    return [member.value for member in enum_cls]
