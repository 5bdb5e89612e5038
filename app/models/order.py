"""
Order model for GoWater Dispatch.

Only the routing-relevant columns are owned by the dispatch core
(status, estimated_delivery_time, delivery_sequence); the rest is written by
the dashboard's order forms.
"""
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel
from app.models.enums import OrderStatus, PaymentMethod, enum_values

if TYPE_CHECKING:
    from app.models.route import Route


class Order(BaseModel):
    """
    Customer order delivered by a truck route.

    Coordinates are stored as text in ``"<lat>,<lng>"`` form; the routing
    core parses them on every computation and never writes them back.
    """
    __tablename__ = "orders"

    # =========================================================================
    # Order Reference
    # =========================================================================
    customer_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )

    total: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
    )

    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        Enum(PaymentMethod, name="payment_method", values_callable=enum_values),
        nullable=True,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    # =========================================================================
    # Status
    # =========================================================================
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, name="order_status", values_callable=enum_values),
        nullable=False,
        default=OrderStatus.PENDING,
    )

    # =========================================================================
    # Delivery Location
    # =========================================================================
    delivery_coordinates: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment='Delivery point as "<lat>,<lng>"',
    )

    # =========================================================================
    # Routing (written by the dispatch core)
    # =========================================================================
    route_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("routes.id"),
        nullable=True,
        index=True,
    )

    estimated_delivery_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    delivery_sequence: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Position within its route (1-based)",
    )

    # =========================================================================
    # Relationships
    # =========================================================================
    route: Mapped[Optional["Route"]] = relationship(
        "Route",
        back_populates="orders",
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, status={self.status.value if self.status else None}, "
            f"route={self.route_id}, seq={self.delivery_sequence})>"
        )
