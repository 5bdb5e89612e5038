"""Tests for app.services.routing.eta."""
from datetime import datetime, timedelta, timezone

from app.services.routing.eta import StopEstimate, propagate_etas
from app.services.routing.parameters import RoutingParameters

START = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


class TestPropagateEtas:

    def test_position_based_times(self, params):
        etas = propagate_etas([5, 3, 9], START, params=params)
        assert etas[5].estimated_delivery_time == START
        assert etas[3].estimated_delivery_time == START + timedelta(minutes=25)
        assert etas[9].estimated_delivery_time == START + timedelta(minutes=50)

    def test_delivery_sequence_is_one_based(self, params):
        etas = propagate_etas([5, 3, 9], START, params=params)
        assert [etas[i].delivery_sequence for i in (5, 3, 9)] == [1, 2, 3]

    def test_strictly_increasing(self, params):
        sequence = [10, 11, 12, 13, 14]
        etas = propagate_etas(sequence, START, params=params)
        times = [etas[i].estimated_delivery_time for i in sequence]
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_gap_override(self, params):
        etas = propagate_etas([1, 2], START, inter_stop_gap_minutes=0, params=params)
        assert etas[2].estimated_delivery_time == START + timedelta(minutes=10)

    def test_gap_from_params(self):
        params = RoutingParameters(service_duration_minutes=5, inter_stop_gap_minutes=5)
        etas = propagate_etas([1, 2], START, params=params)
        assert etas[2].estimated_delivery_time == START + timedelta(minutes=10)

    def test_empty_sequence(self, params):
        assert propagate_etas([], START, params=params) == {}

    def test_repeated_id_keeps_first_position(self, params):
        etas = propagate_etas([1, 2, 1], START, params=params)
        assert etas[1].delivery_sequence == 1
        assert len(etas) == 2

    def test_zero_length_step_with_no_service_and_gap(self):
        params = RoutingParameters(service_duration_minutes=0, inter_stop_gap_minutes=0)
        etas = propagate_etas([1, 2], START, params=params)
        assert etas[1].estimated_delivery_time == etas[2].estimated_delivery_time


class TestStopEstimate:

    def test_as_fields(self):
        est = StopEstimate(order_id=1, estimated_delivery_time=START, delivery_sequence=2)
        assert est.as_fields() == {
            "estimated_delivery_time": START,
            "delivery_sequence": 2,
        }
