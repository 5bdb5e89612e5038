"""FastAPI dependencies for the routing service."""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.database import get_session
from app.repositories import SqlOrderRepository, SqlRouteRepository
from app.services.routing import RouteService


def get_route_service(
    session: Annotated[Session, Depends(get_session)],
) -> RouteService:
    """Dependency that builds a RouteService bound to the request's session.

    Usage:
        @router.post("/{route_id}/start")
        def start_route(
            service: Annotated[RouteService, Depends(get_route_service)]
        ):
            ...

    The session commits when the request finishes without error and rolls
    back otherwise.
    """
    return RouteService(
        orders=SqlOrderRepository(session),
        routes=SqlRouteRepository(session),
    )


RouteServiceDep = Annotated[RouteService, Depends(get_route_service)]
