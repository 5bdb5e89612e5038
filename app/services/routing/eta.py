"""
ETA Propagator.

Position-based delivery estimates: the i-th stop (0-based) is expected at
``start + i * (service_duration + inter_stop_gap)``. Leg distances are
deliberately not used here; see DESIGN.md.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from app.services.routing.parameters import RoutingParameters


@dataclass(frozen=True)
class StopEstimate:
    """Proposed routing fields for one order."""
    order_id: int
    estimated_delivery_time: datetime
    delivery_sequence: int  # 1-based position in the route

    def as_fields(self) -> dict:
        return {
            "estimated_delivery_time": self.estimated_delivery_time,
            "delivery_sequence": self.delivery_sequence,
        }


def propagate_etas(
    sequence: Sequence[int],
    start_time: datetime,
    inter_stop_gap_minutes: Optional[int] = None,
    params: Optional[RoutingParameters] = None,
) -> dict[int, StopEstimate]:
    """
    Estimated delivery time per order id in *sequence*.

    Pure function. Orders absent from *sequence* get no entry, so callers
    must leave their stored estimate untouched. A repeated id keeps its
    first position.
    """
    params = params or RoutingParameters.from_settings()
    gap = params.inter_stop_gap_minutes if inter_stop_gap_minutes is None else inter_stop_gap_minutes
    step = timedelta(minutes=params.service_duration_minutes + gap)

    estimates: dict[int, StopEstimate] = {}
    for position, order_id in enumerate(sequence):
        if order_id in estimates:
            continue
        estimates[order_id] = StopEstimate(
            order_id=order_id,
            estimated_delivery_time=start_time + position * step,
            delivery_sequence=position + 1,
        )
    return estimates
