"""
Order Pydantic schemas.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.models.enums import OrderStatus
from app.schemas.base import BaseSchema


class OrderResponse(BaseSchema):
    """Routing view of an order."""
    id: int
    status: OrderStatus
    customer_id: Optional[int] = None
    total: Optional[Decimal] = None
    delivery_coordinates: Optional[str] = None
    route_id: Optional[int] = None
    delivery_sequence: Optional[int] = None
    estimated_delivery_time: Optional[datetime] = None
