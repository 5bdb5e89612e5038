"""
SQLAlchemy ORM Models for GoWater Dispatch.

This module exports the order and route tables used by the routing core,
plus their enums.
"""

# Enums
from app.models.enums import (
    RouteStatus,
    OrderStatus,
    PaymentMethod,
    enum_values,
)

# Base
from app.models.base import BaseModel, TimestampMixin, IntegerPrimaryKeyMixin

# Domain Models
from app.models.route import Route
from app.models.order import Order

__all__ = [
    # Enums
    "RouteStatus",
    "OrderStatus",
    "PaymentMethod",
    "enum_values",
    # Base
    "BaseModel",
    "TimestampMixin",
    "IntegerPrimaryKeyMixin",
    # Domain Models
    "Route",
    "Order",
]
