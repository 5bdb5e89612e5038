"""
Route model for GoWater Dispatch.

Stores the planned visit order of a truck and its live progress.
"""
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, Enum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel
from app.models.enums import RouteStatus, enum_values

if TYPE_CHECKING:
    from app.models.order import Order


class Route(BaseModel):
    """
    Delivery route for one truck crew.

    Stores:
    - Crew and truck assignment
    - The optimized visit order (write-once)
    - Live progress (current location, start/end, last report)
    """
    __tablename__ = "routes"

    # =========================================================================
    # Route Identification
    # =========================================================================
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    # =========================================================================
    # Optimistic Locking
    # =========================================================================
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Optimistic locking version counter",
    )

    # =========================================================================
    # Crew & Truck Assignment
    # =========================================================================
    driver_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    assistant_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    truck_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # =========================================================================
    # Route Status
    # =========================================================================
    status: Mapped[RouteStatus] = mapped_column(
        Enum(RouteStatus, name="route_status", values_callable=enum_values),
        nullable=False,
        default=RouteStatus.PENDING,
    )

    # =========================================================================
    # Optimization Results
    # =========================================================================
    delivery_sequence: Mapped[Optional[list]] = mapped_column(
        JSON,
        nullable=True,
        comment="Ordered order ids; set once when the route is planned",
    )

    total_distance_km: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
    )

    estimated_duration_minutes: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    # =========================================================================
    # Progress Tracking
    # =========================================================================
    current_location: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment='Last reported truck position as "<lat>,<lng>"',
    )

    start_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    end_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    last_update: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # =========================================================================
    # Relationships
    # =========================================================================
    orders: Mapped[list["Order"]] = relationship(
        "Order",
        back_populates="route",
        order_by="Order.delivery_sequence",
    )

    def __repr__(self) -> str:
        return (
            f"<Route(id={self.id}, name={self.name!r}, "
            f"status={self.status.value if self.status else None}, v={self.version})>"
        )
