"""
Order lifecycle endpoints.
"""
from fastapi import APIRouter

from app.core.dependencies import RouteServiceDep
from app.schemas.order import OrderResponse

router = APIRouter()


@router.post("/{order_id}/in-transit", response_model=OrderResponse)
def mark_in_transit(order_id: int, service: RouteServiceDep):
    """Mark a pending order as loaded on a truck."""
    return OrderResponse.model_validate(service.mark_order_in_transit(order_id))


@router.post("/{order_id}/delivered", response_model=OrderResponse)
def mark_delivered(order_id: int, service: RouteServiceDep):
    """Mark an in-transit order as delivered."""
    return OrderResponse.model_validate(service.mark_order_delivered(order_id))


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: int, service: RouteServiceDep):
    """Cancel an order that has not been delivered yet."""
    return OrderResponse.model_validate(service.cancel_order(order_id))
