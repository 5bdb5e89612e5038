"""Tests for app.core.exceptions -- error kinds and their context."""
from app.core.exceptions import (
    ConcurrentModification,
    DispatchError,
    InvalidCoordinateFormat,
    InvalidTransition,
    NotFound,
    NoValidStops,
    PersistenceFailure,
)


class TestErrorBodies:

    def test_invalid_transition_context(self):
        err = InvalidTransition("route", 5, "start", "in_progress", ["pending"])
        body = err.to_dict()

        assert body["error"] == "invalid_transition"
        assert body["context"] == {
            "entity": "route",
            "entity_id": 5,
            "action": "start",
            "current": "in_progress",
            "allowed": ["pending"],
            "terminal": False,
        }
        assert "route 5" in body["message"]

    def test_terminal_transition_message(self):
        err = InvalidTransition(
            "order", 3, "cancel", "delivered", ["in_transit", "pending"], terminal=True
        )
        assert err.message == "Cannot cancel order 3: status 'delivered' is final"
        assert err.context["terminal"] is True

    def test_add_context_keeps_existing_keys(self):
        err = NotFound("order", 9).add_context(action="optimize", entity_id=1, route_id=None)
        assert err.context == {"entity": "order", "entity_id": 9, "action": "optimize"}

    def test_route_location_subject(self):
        err = InvalidCoordinateFormat("x", "bad", route_id=2, action="start")
        assert err.message == "Invalid coordinates for route 2 location: bad"
        assert err.context["route_id"] == 2
        assert err.context["action"] == "start"

    def test_no_valid_stops_stringifies_rejected_keys(self):
        err = NoValidStops([3, 4], {3: "coordinates are missing"})
        assert err.to_dict()["context"]["rejected"] == {"3": "coordinates are missing"}
        assert err.rejected == {3: "coordinates are missing"}

    def test_not_found(self):
        err = NotFound("order", 9)
        assert err.message == "Order 9 not found"
        assert err.code == "not_found"

    def test_persistence_failure_hides_cause(self):
        err = PersistenceFailure("update", "route", 2, detail="OperationalError", action="start")
        body = err.to_dict()
        assert body["context"]["detail"] == "OperationalError"
        assert body["context"]["action"] == "start"
        assert "Traceback" not in body["message"]

    def test_concurrent_modification_is_persistence_failure(self):
        err = ConcurrentModification("route", 2, expected_version=4)
        assert isinstance(err, PersistenceFailure)
        assert err.code == "concurrent_modification"
        assert err.context["expected_version"] == 4

    def test_all_share_base(self):
        for err in (
            InvalidCoordinateFormat("x", "bad"),
            NoValidStops([]),
            NotFound("route", 1),
        ):
            assert isinstance(err, DispatchError)
