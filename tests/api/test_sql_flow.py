"""Route lifecycle through the API with the real SQL repositories on SQLite."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.database import Base
from app.models import Order, OrderStatus, Route, RouteStatus

NOW = datetime(2026, 3, 2, 7, 30, tzinfo=timezone.utc)


@pytest.fixture
def sql_session_maker():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(engine, expire_on_commit=False, autoflush=False)
    with factory() as session:
        session.add_all([
            Route(id=10, name="Este", date=NOW, driver_id=1, truck_id=2),
            Order(id=1, customer_id=1, total=Decimal("100"), date=NOW,
                  delivery_coordinates="18.5,-69.9"),
            Order(id=2, customer_id=2, total=Decimal("100"), date=NOW,
                  delivery_coordinates="18.4,-69.8"),
            Order(id=3, customer_id=3, total=Decimal("100"), date=NOW,
                  delivery_coordinates="18.47,-69.93"),
        ])
        session.commit()
    yield factory
    engine.dispose()


@pytest.fixture
async def sql_client(app, sql_session_maker):
    """Client whose requests run against the SQLite database."""
    from httpx import AsyncClient, ASGITransport
    from app.db.database import get_session

    def override_session():
        with sql_session_maker() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    app.dependency_overrides[get_session] = override_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


class TestSqlLifecycle:

    async def test_plan_start_complete(self, sql_client, sql_session_maker):
        response = await sql_client.post("/api/v1/routes/10/plan", json={"orderIds": [2, 3, 1]})
        assert response.status_code == 200
        assert response.json()["deliverySequence"] == [1, 3, 2]

        response = await sql_client.post(
            "/api/v1/routes/10/start", json={"currentLocation": "18.4955,-69.8734"}
        )
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["orders"]] == [1, 3, 2]

        response = await sql_client.post(
            "/api/v1/routes/10/complete", json={"currentLocation": "18.4955,-69.8734"}
        )
        assert response.status_code == 200

        with sql_session_maker() as session:
            route = session.get(Route, 10)
            assert route.status == RouteStatus.COMPLETED
            assert route.version == 4
            orders = session.query(Order).order_by(Order.delivery_sequence).all()
            assert [o.id for o in orders] == [1, 3, 2]
            assert all(o.route_id == 10 for o in orders)
            assert all(o.estimated_delivery_time is not None for o in orders)
            assert all(o.status == OrderStatus.PENDING for o in orders)

    async def test_rejected_transition_leaves_row_unchanged(self, sql_client, sql_session_maker):
        response = await sql_client.post(
            "/api/v1/routes/10/location", json={"currentLocation": "18.5,-69.9"}
        )
        assert response.status_code == 409

        with sql_session_maker() as session:
            route = session.get(Route, 10)
            assert route.current_location is None
            assert route.version == 1
