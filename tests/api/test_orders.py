"""Tests for Order lifecycle endpoints."""


class TestOrderTransitions:

    async def test_in_transit(self, client):
        response = await client.post("/api/v1/orders/1/in-transit")
        assert response.status_code == 200
        assert response.json()["status"] == "in_transit"

    async def test_delivered_after_in_transit(self, client):
        await client.post("/api/v1/orders/1/in-transit")
        response = await client.post("/api/v1/orders/1/delivered")
        assert response.status_code == 200
        assert response.json()["status"] == "delivered"

    async def test_pending_cannot_be_delivered(self, client, order_repo):
        response = await client.post("/api/v1/orders/1/delivered")
        assert response.status_code == 409
        assert response.json()["context"]["entity"] == "order"
        assert order_repo.rows[1].status == "pending"

    async def test_cancel(self, client):
        response = await client.post("/api/v1/orders/2/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    async def test_unknown_order_returns_404(self, client):
        response = await client.post("/api/v1/orders/404/cancel")
        assert response.status_code == 404
