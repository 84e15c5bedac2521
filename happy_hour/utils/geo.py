"""Great-circle distance helpers."""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from happy_hour.constants import EARTH_RADIUS_MILES


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in miles between two points given in degrees."""
    d_lat = radians(lat2 - lat1)
    d_lng = radians(lng2 - lng1)
    a = sin(d_lat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lng / 2) ** 2
    a = min(1.0, a)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_MILES * c
