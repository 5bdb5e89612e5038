"""Root conftest.py -- shared fixtures for all test modules."""
import os

import pytest

# Set env vars BEFORE any app imports to prevent real DB connections
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from app.core.config import get_settings, Settings
from app.models.enums import OrderStatus, RouteStatus
from app.services.routing.locks import RouteLockRegistry
from app.services.routing.parameters import Depot, RoutingParameters, get_depot
from app.services.routing.records import OrderSnapshot, RouteSnapshot
from app.services.routing.service import RouteService

from tests.fakes import FrozenClock, InMemoryOrderRepository, InMemoryRouteRepository


# =========================================================================
# Settings
# =========================================================================
@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Clear LRU caches before each test to prevent stale settings."""
    get_settings.cache_clear()
    get_depot.cache_clear()
    yield
    get_settings.cache_clear()
    get_depot.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    return get_settings()


# =========================================================================
# Routing constants
# =========================================================================
@pytest.fixture
def depot() -> Depot:
    return Depot(name="Santo Domingo", latitude=18.4955, longitude=-69.8734)


@pytest.fixture
def params() -> RoutingParameters:
    return RoutingParameters(
        average_speed_kmh=30.0,
        service_duration_minutes=10,
        inter_stop_gap_minutes=15,
        distance_precision=2,
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


# =========================================================================
# Record Factories
# =========================================================================
@pytest.fixture
def make_order():
    def _make(
        order_id: int = 1,
        coords: str | None = "18.5,-69.9",
        status: OrderStatus = OrderStatus.PENDING,
        **fields,
    ) -> OrderSnapshot:
        return OrderSnapshot(
            id=order_id,
            status=status,
            delivery_coordinates=coords,
            customer_id=fields.pop("customer_id", 100 + order_id),
            **fields,
        )

    return _make


@pytest.fixture
def make_route():
    def _make(
        route_id: int = 1,
        status: RouteStatus = RouteStatus.PENDING,
        sequence: tuple[int, ...] = (),
        **fields,
    ) -> RouteSnapshot:
        return RouteSnapshot(
            id=route_id,
            status=status,
            name=fields.pop("name", f"Route {route_id}"),
            driver_id=fields.pop("driver_id", 7),
            truck_id=fields.pop("truck_id", 3),
            delivery_sequence=tuple(sequence),
            **fields,
        )

    return _make


# =========================================================================
# Service over in-memory repositories
# =========================================================================
@pytest.fixture
def order_repo(make_order) -> InMemoryOrderRepository:
    """Three routable orders around Santo Domingo plus one without coordinates."""
    return InMemoryOrderRepository([
        make_order(1, "18.5,-69.9"),
        make_order(2, "18.4,-69.8"),
        make_order(3, "18.47,-69.93"),
        make_order(4, None),
    ])


@pytest.fixture
def route_repo(make_route) -> InMemoryRouteRepository:
    return InMemoryRouteRepository([
        make_route(1, RouteStatus.PENDING, sequence=(1, 3, 2)),
        make_route(2, RouteStatus.PENDING),
        make_route(3, RouteStatus.IN_PROGRESS, sequence=(1, 2), current_location="18.49,-69.87"),
        make_route(4, RouteStatus.COMPLETED, sequence=(3,)),
    ])


@pytest.fixture
def service(order_repo, route_repo, depot, params, clock) -> RouteService:
    return RouteService(
        order_repo,
        route_repo,
        depot=depot,
        params=params,
        clock=clock,
        locks=RouteLockRegistry(),
    )


# =========================================================================
# FastAPI Test Client
# =========================================================================
@pytest.fixture
def app():
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def client(app, service):
    """httpx.AsyncClient with the route service backed by in-memory repositories."""
    from httpx import AsyncClient, ASGITransport
    from app.core.dependencies import get_route_service

    app.dependency_overrides[get_route_service] = lambda: service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
