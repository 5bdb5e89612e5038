"""Tests for app.models.enums -- stored status values."""
import pytest

from app.models.enums import OrderStatus, PaymentMethod, RouteStatus, enum_values


class TestRouteStatus:

    def test_values_match_stored_text(self):
        assert enum_values(RouteStatus) == ["pending", "in_progress", "completed"]

    def test_only_completed_is_terminal(self):
        assert [s for s in RouteStatus if s.is_terminal] == [RouteStatus.COMPLETED]

    def test_str_comparison(self):
        assert RouteStatus.IN_PROGRESS == "in_progress"


class TestOrderStatus:

    def test_values_match_stored_text(self):
        assert enum_values(OrderStatus) == ["pending", "in_transit", "delivered", "cancelled"]

    @pytest.mark.parametrize("status,terminal", [
        (OrderStatus.PENDING, False),
        (OrderStatus.IN_TRANSIT, False),
        (OrderStatus.DELIVERED, True),
        (OrderStatus.CANCELLED, True),
    ])
    def test_is_terminal(self, status, terminal):
        assert status.is_terminal is terminal


class TestPaymentMethod:

    def test_from_value(self):
        assert PaymentMethod("credit_card") is PaymentMethod.CREDIT_CARD
