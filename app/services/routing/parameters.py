"""
Routing constants and the depot, resolved from application settings.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from app.core.config import Settings, get_settings
from app.services.routing.geo import GeoPoint


@dataclass(frozen=True)
class Depot:
    """Fixed dispatch origin and return point of every route."""
    name: str
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        # Fail at startup rather than on the first optimization
        GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True)
class RoutingParameters:
    """Constants used by route building and ETA propagation."""
    average_speed_kmh: float = 30.0
    service_duration_minutes: int = 10
    inter_stop_gap_minutes: int = 15
    distance_precision: int = 2

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RoutingParameters":
        settings = settings or get_settings()
        return cls(
            average_speed_kmh=settings.average_speed_kmh,
            service_duration_minutes=settings.service_duration_minutes,
            inter_stop_gap_minutes=settings.inter_stop_gap_minutes,
            distance_precision=settings.distance_precision,
        )


@lru_cache()
def get_depot() -> Depot:
    """Depot configured for this process (cached; immutable for its lifetime)."""
    settings = get_settings()
    return Depot(
        name=settings.depot_name,
        latitude=settings.depot_latitude,
        longitude=settings.depot_longitude,
    )
