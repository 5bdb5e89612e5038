"""
Route API endpoints.

Handlers are plain ``def`` functions: the routing service and its
repositories are synchronous, so FastAPI runs them in its threadpool.
Domain errors propagate to the exception handlers registered in
``app.main``.
"""
from fastapi import APIRouter

from app.core.dependencies import RouteServiceDep
from app.schemas.order import OrderResponse
from app.schemas.route import (
    ComputeRouteResponse,
    LocationRequest,
    OptimizeRequest,
    RouteResponse,
    StartRouteResponse,
)

router = APIRouter()


@router.post("/optimize", response_model=ComputeRouteResponse)
def optimize_route(request: OptimizeRequest, service: RouteServiceDep):
    """
    Compute a visit order for a set of orders.

    Nothing is persisted. Orders whose coordinates cannot be parsed are
    listed in **rejectedOrders**; if none remain the request fails with 400.
    """
    outcome = service.optimize(request.order_ids)
    return ComputeRouteResponse.from_outcome(outcome)


@router.post("/{route_id}/plan", response_model=RouteResponse)
def plan_route(route_id: int, request: OptimizeRequest, service: RouteServiceDep):
    """
    Optimize the given orders and store the result on a pending route.

    The delivery sequence can only be set once.
    """
    route, _ = service.assign_route_plan(route_id, request.order_ids)
    return RouteResponse.model_validate(route)


@router.get("/{route_id}", response_model=RouteResponse)
def get_route(route_id: int, service: RouteServiceDep):
    """Get route details."""
    return RouteResponse.model_validate(service.get_route(route_id))


@router.get("/{route_id}/orders", response_model=list[OrderResponse])
def get_route_orders(route_id: int, service: RouteServiceDep):
    """Get the orders of a route in planned visit order."""
    return [OrderResponse.model_validate(o) for o in service.get_route_orders(route_id)]


@router.post("/{route_id}/start", response_model=StartRouteResponse)
def start_route(route_id: int, request: LocationRequest, service: RouteServiceDep):
    """
    Dispatch a pending route.

    Every order in the route's sequence gets a fresh estimated delivery
    time anchored at the moment of dispatch.
    """
    outcome = service.start_route(route_id, request.current_location)
    return StartRouteResponse(
        route=RouteResponse.model_validate(outcome.route),
        orders=[OrderResponse.model_validate(o) for o in outcome.orders],
    )


@router.post("/{route_id}/location", response_model=RouteResponse)
def report_location(route_id: int, request: LocationRequest, service: RouteServiceDep):
    """Record the truck's current position. Estimates are not recomputed."""
    route = service.report_location(route_id, request.current_location)
    return RouteResponse.model_validate(route)


@router.post("/{route_id}/complete", response_model=RouteResponse)
def complete_route(route_id: int, request: LocationRequest, service: RouteServiceDep):
    """Close a route that is in progress."""
    route = service.complete_route(route_id, request.current_location)
    return RouteResponse.model_validate(route)
