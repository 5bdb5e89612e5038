"""
Storage interfaces consumed by the routing service.

Implementations are synchronous and return fully materialized snapshots.
Lookups of unknown ids raise ``NotFound``; storage errors surface as
``PersistenceFailure``.
"""
from typing import Any, Optional, Protocol

from app.services.routing.records import OrderSnapshot, RouteSnapshot


class OrderRepository(Protocol):

    def get_order(self, order_id: int) -> OrderSnapshot:
        ...

    def list_orders(self) -> list[OrderSnapshot]:
        ...

    def update_order_fields(self, order_id: int, fields: dict[str, Any]) -> OrderSnapshot:
        ...


class RouteRepository(Protocol):

    def get_route(self, route_id: int) -> RouteSnapshot:
        ...

    def update_route_fields(
        self,
        route_id: int,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> RouteSnapshot:
        """
        Apply *fields* and bump the route version.

        When *expected_version* is given the write only succeeds if the stored
        version still matches; otherwise ``ConcurrentModification`` is raised.
        """
        ...
