"""
Coordinate parsing and great-circle distance.

Coordinates travel between the dashboard, the database and this service as
``"<lat>,<lng>"`` text. ``parse_coordinates`` and ``format_coordinates`` are
the only places that convert between that text and numbers.
"""
import math
import re
from dataclasses import dataclass
from math import radians, sin, cos, sqrt, atan2
from typing import Optional, Protocol

from app.core.exceptions import InvalidCoordinateFormat

EARTH_RADIUS_KM = 6371.0

# Plain decimal text, optionally with an exponent
DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class Point(Protocol):
    """Anything with a latitude and a longitude in degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoPoint:
    """A validated (latitude, longitude) pair."""
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class DeliveryPoint:
    """Delivery location of one order, parsed from its stored coordinates."""
    order_id: int
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_coordinate(self.latitude, self.longitude, order_id=self.order_id)

    @classmethod
    def from_text(cls, order_id: int, text: Optional[str]) -> "DeliveryPoint":
        """Parse an order's ``"<lat>,<lng>"`` coordinates."""
        point = parse_coordinates(text, order_id=order_id)
        return cls(order_id=order_id, latitude=point.latitude, longitude=point.longitude)


def validate_coordinate(lat: float, lng: float, order_id: Optional[int] = None) -> None:
    """Validate that coordinates are finite and within valid bounds.

    Raises:
        InvalidCoordinateFormat: If coordinates are out of range.
    """
    value = f"{lat},{lng}"
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinateFormat(value, "coordinates must be finite numbers", order_id)
    if not (-90.0 <= lat <= 90.0):
        raise InvalidCoordinateFormat(value, f"latitude {lat} out of range [-90, 90]", order_id)
    if not (-180.0 <= lng <= 180.0):
        raise InvalidCoordinateFormat(value, f"longitude {lng} out of range [-180, 180]", order_id)


def parse_coordinates(text: Optional[str], order_id: Optional[int] = None) -> GeoPoint:
    """
    Parse ``"<lat>,<lng>"`` into a validated point.

    The stored format has exactly one comma and no whitespace anywhere.

    Raises:
        InvalidCoordinateFormat: If the text is absent, malformed or out of range.
    """
    if text is None:
        raise InvalidCoordinateFormat(text, "coordinates are missing", order_id)
    if not isinstance(text, str) or not text:
        raise InvalidCoordinateFormat(text, "coordinates are empty", order_id)
    if any(ch.isspace() for ch in text):
        raise InvalidCoordinateFormat(text, "coordinates must not contain whitespace", order_id)

    parts = text.split(",")
    if len(parts) != 2:
        raise InvalidCoordinateFormat(
            text, f"expected '<lat>,<lng>', got {len(parts)} part(s)", order_id
        )

    if not all(DECIMAL_PATTERN.fullmatch(part) for part in parts):
        raise InvalidCoordinateFormat(
            text, "latitude and longitude must be decimal numbers", order_id
        )
    lat, lng = float(parts[0]), float(parts[1])

    validate_coordinate(lat, lng, order_id=order_id)
    return GeoPoint(latitude=lat, longitude=lng)


def format_coordinates(point: Point) -> str:
    """Render a point back into the stored ``"<lat>,<lng>"`` form."""
    return f"{point.latitude!r},{point.longitude!r}"


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points in kilometers.

    Uses the Haversine formula.
    """
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    delta_lat = radians(lat2 - lat1)
    delta_lon = radians(lon2 - lon1)

    a = sin(delta_lat / 2) ** 2 + cos(lat1_rad) * cos(lat2_rad) * sin(delta_lon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: Point, b: Point) -> float:
    """Great-circle distance between two points, in kilometers."""
    # Order the operands so the result is bit-for-bit symmetric
    first, second = sorted(((a.latitude, a.longitude), (b.latitude, b.longitude)))
    if first == second:
        return 0.0
    return haversine_distance(first[0], first[1], second[0], second[1])
