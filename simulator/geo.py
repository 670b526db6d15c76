# simulator/geo.py
from __future__ import annotations
import math

from model.bin import Point
from simulator.errors import InvalidArgument

EARTH_RADIUS_KM = 6371.0


def check_point(p) -> Point:
    try:
        lat, lon = p
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        raise InvalidArgument(f"Malformed coordinate: {p!r}")
    if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lon <= 180.0):
        raise InvalidArgument(f"Coordinate out of range: {p!r}")
    return lat, lon


def distance_km(a: Point, b: Point) -> float:
    """Great-circle (haversine) distance between two (lat, lon) points."""
    lat1, lon1 = check_point(a)
    lat2, lon2 = check_point(b)
    if (lat1, lon1) == (lat2, lon2):
        return 0.0

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    x = (math.sin(dlat / 2.0) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(dlon / 2.0) ** 2)
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, x)))


def interpolate(a: Point, b: Point, fraction: float) -> Point:
    return (a[0] + (b[0] - a[0]) * fraction,
            a[1] + (b[1] - a[1]) * fraction)
