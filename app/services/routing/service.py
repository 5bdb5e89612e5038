"""
Route Service: the entry point used by the HTTP layer.

Loads records through the repositories, runs the pure routing functions
and writes the resulting field changes back. Transitions on the same route
are serialized with a per-route lock, and route writes carry the version
read under that lock.

Writes are not transactional here: when a multi-step save fails midway,
earlier writes stay applied unless the session owner rolls back.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Sequence

from app.core.exceptions import DispatchError, PersistenceFailure, InvalidTransition
from app.models.enums import RouteStatus
from app.services.routing.builder import OptimizedRoute, build_route
from app.services.routing.locks import RouteLockRegistry, route_locks
from app.services.routing.parameters import Depot, RoutingParameters, get_depot
from app.services.routing.records import OrderSnapshot, RouteSnapshot
from app.services.routing import state_machine

if TYPE_CHECKING:
    from app.repositories.protocols import OrderRepository, RouteRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OptimizationOutcome:
    """Computed route plus the orders left out of it."""
    route: OptimizedRoute
    rejected: dict[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StartRouteOutcome:
    """Route after dispatch and the orders whose estimates were rewritten."""
    route: RouteSnapshot
    orders: list[OrderSnapshot]


class RouteService:
    """
    Orchestrates route optimization and route/order lifecycle.

    Usage:
        service = RouteService(SqlOrderRepository(session), SqlRouteRepository(session))
        outcome = service.optimize([1, 2, 3])
        service.start_route(route_id, "18.5,-69.9")
    """

    def __init__(
        self,
        orders: "OrderRepository",
        routes: "RouteRepository",
        depot: Optional[Depot] = None,
        params: Optional[RoutingParameters] = None,
        clock: Callable[[], datetime] = utc_now,
        locks: Optional[RouteLockRegistry] = None,
    ):
        self.orders = orders
        self.routes = routes
        self.depot = depot or get_depot()
        self.params = params or RoutingParameters.from_settings()
        self.clock = clock
        self.locks = locks or route_locks

    # =========================================================================
    # Helpers
    # =========================================================================

    @contextmanager
    def _tagged(self, action: Optional[str], route_id: Optional[int] = None) -> Iterator[None]:
        """Attach the requested action and route id to domain errors raised inside."""
        try:
            yield
        except DispatchError as e:
            e.add_context(action=action, route_id=route_id)
            raise

    @contextmanager
    def _storage(
        self,
        operation: str,
        entity: str,
        entity_id: Optional[int] = None,
        action: Optional[str] = None,
        route_id: Optional[int] = None,
    ) -> Iterator[None]:
        """Tag domain errors with request context and wrap storage failures."""
        if route_id is None and entity == "route":
            route_id = entity_id
        try:
            with self._tagged(action, route_id):
                yield
        except DispatchError:
            raise
        except Exception as e:
            logger.error(f"Storage error during {operation} on {entity} {entity_id}: {e}")
            raise PersistenceFailure(
                operation, entity, entity_id, detail=type(e).__name__
            ).add_context(action=action, route_id=route_id) from e

    def _load_route(self, route_id: int, action: Optional[str] = None) -> RouteSnapshot:
        with self._storage("get", "route", route_id, action):
            return self.routes.get_route(route_id)

    def _load_order(
        self, order_id: int, action: Optional[str] = None, route_id: Optional[int] = None
    ) -> OrderSnapshot:
        with self._storage("get", "order", order_id, action, route_id):
            return self.orders.get_order(order_id)

    def _save_route(self, route: RouteSnapshot, fields: dict, action: str) -> RouteSnapshot:
        with self._storage("update", "route", route.id, action):
            return self.routes.update_route_fields(
                route.id, fields, expected_version=route.version
            )

    def _save_order(
        self, order_id: int, fields: dict, action: str, route_id: Optional[int] = None
    ) -> OrderSnapshot:
        with self._storage("update", "order", order_id, action, route_id):
            return self.orders.update_order_fields(order_id, fields)

    def _sequenced_orders(
        self, route: RouteSnapshot, action: Optional[str] = None
    ) -> list[OrderSnapshot]:
        """Orders of the route in visit order. Unknown ids are logged and skipped."""
        with self._storage("list", "order", action=action, route_id=route.id):
            by_id = {o.id: o for o in self.orders.list_orders()}

        missing = [order_id for order_id in route.delivery_sequence if order_id not in by_id]
        if missing:
            logger.warning(f"Route {route.id} references unknown order(s) {missing}")
        return [by_id[order_id] for order_id in route.delivery_sequence if order_id in by_id]

    # =========================================================================
    # Optimization
    # =========================================================================

    def optimize(self, order_ids: Sequence[int]) -> OptimizationOutcome:
        """
        Compute a visit order for the given orders.

        Orders with missing or unparseable coordinates are logged and left
        out of the route.

        Raises:
            NotFound: If an order id does not exist.
            NoValidStops: If no order has usable coordinates.
        """
        return self._optimize(order_ids, "optimize")

    def _optimize(
        self, order_ids: Sequence[int], action: str, route_id: Optional[int] = None
    ) -> OptimizationOutcome:
        logger.info(f"Optimizing route for {len(order_ids)} order(s)")
        loaded = [self._load_order(order_id, action, route_id) for order_id in order_ids]

        with self._tagged(action, route_id):
            result = build_route(loaded, depot=self.depot, params=self.params)
        for order_id, reason in result.rejected.items():
            logger.warning(f"Order {order_id} excluded from route: {reason}")

        return OptimizationOutcome(route=result.route, rejected=result.rejected)

    def assign_route_plan(
        self,
        route_id: int,
        order_ids: Sequence[int],
    ) -> tuple[RouteSnapshot, OptimizationOutcome]:
        """
        Optimize *order_ids* and store the plan on a pending route.

        The delivery sequence is written once; re-planning a route that
        already has one is refused.

        Raises:
            InvalidTransition: If the route is not pending or already planned.
        """
        action = "plan"
        with self.locks.hold(route_id):
            route = self._load_route(route_id, action)
            if route.status != RouteStatus.PENDING or route.delivery_sequence:
                current = route.status.value
                if route.delivery_sequence:
                    current = f"{current} (already planned)"
                raise InvalidTransition(
                    "route",
                    route_id,
                    action,
                    current,
                    [RouteStatus.PENDING.value],
                    terminal=route.status.is_terminal,
                )

            outcome = self._optimize(order_ids, action, route_id)
            plan = outcome.route
            saved = self._save_route(
                route,
                {
                    "delivery_sequence": list(plan.sequence),
                    "total_distance_km": plan.total_distance_km,
                    "estimated_duration_minutes": plan.estimated_duration_minutes,
                },
                action,
            )
            for stop in plan.stops:
                self._save_order(
                    stop.order_id,
                    {"route_id": route_id, "delivery_sequence": stop.sequence_index},
                    action,
                    route_id,
                )

        logger.info(f"Route {route_id} planned with {plan.num_stops} stop(s)")
        return saved, outcome

    # =========================================================================
    # Reads
    # =========================================================================

    def get_route(self, route_id: int) -> RouteSnapshot:
        return self._load_route(route_id)

    def get_route_orders(self, route_id: int) -> list[OrderSnapshot]:
        """Orders of a route in planned visit order."""
        route = self._load_route(route_id)
        return self._sequenced_orders(route)

    # =========================================================================
    # Route lifecycle
    # =========================================================================

    def start_route(self, route_id: int, current_location: str) -> StartRouteOutcome:
        """
        Dispatch a pending route and recompute its orders' ETAs from now.

        Raises:
            NotFound, InvalidTransition, InvalidCoordinateFormat, PersistenceFailure
        """
        action = "start"
        with self.locks.hold(route_id):
            route = self._load_route(route_id, action)
            orders = self._sequenced_orders(route, action)

            with self._tagged(action, route_id):
                transition = state_machine.start_route(
                    route, current_location, orders, self.clock(), params=self.params
                )
            saved_route = self._save_route(route, transition.route_fields, action)
            saved_orders = [
                self._save_order(order_id, fields, action, route_id)
                for order_id, fields in transition.order_fields.items()
            ]

        saved_orders.sort(key=lambda o: o.delivery_sequence or 0)
        return StartRouteOutcome(route=saved_route, orders=saved_orders)

    def report_location(self, route_id: int, current_location: str) -> RouteSnapshot:
        """
        Record the truck's position for a route in progress.

        Raises:
            NotFound, InvalidTransition, InvalidCoordinateFormat, PersistenceFailure
        """
        action = "report_location"
        with self.locks.hold(route_id):
            route = self._load_route(route_id, action)
            with self._tagged(action, route_id):
                transition = state_machine.report_location(route, current_location, self.clock())
            return self._save_route(route, transition.route_fields, action)

    def complete_route(self, route_id: int, current_location: str) -> RouteSnapshot:
        """
        Close a route in progress.

        Raises:
            NotFound, InvalidTransition, InvalidCoordinateFormat, PersistenceFailure
        """
        action = "complete"
        with self.locks.hold(route_id):
            route = self._load_route(route_id, action)
            with self._tagged(action, route_id):
                transition = state_machine.complete_route(route, current_location, self.clock())
            return self._save_route(route, transition.route_fields, action)

    # =========================================================================
    # Order lifecycle
    # =========================================================================

    def _apply_order_action(
        self,
        order_id: int,
        action: str,
        transition_fn: Callable[[OrderSnapshot], state_machine.OrderTransition],
    ) -> OrderSnapshot:
        order = self._load_order(order_id, action)
        transition = transition_fn(order)
        return self._save_order(order_id, transition.order_fields, action)

    def mark_order_in_transit(self, order_id: int) -> OrderSnapshot:
        return self._apply_order_action(order_id, "mark_in_transit", state_machine.mark_in_transit)

    def mark_order_delivered(self, order_id: int) -> OrderSnapshot:
        return self._apply_order_action(order_id, "mark_delivered", state_machine.mark_delivered)

    def cancel_order(self, order_id: int) -> OrderSnapshot:
        return self._apply_order_action(order_id, "cancel", state_machine.cancel_order)
