"""
Geo Utilities
=============

Great-circle distance and travel speed for impossible-travel detection.

Version: 0.1.0
"""

import math
from datetime import datetime

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def travel_speed_kmh(distance_km: float, start: datetime, end: datetime) -> float:
    """
    Implied speed between two timestamped points.

    Zero or negative elapsed time with any distance is infinite speed;
    zero distance is always zero speed.
    """
    if distance_km == 0:
        return 0.0
    hours = (end - start).total_seconds() / 3600
    if hours <= 0:
        return math.inf
    return distance_km / hours
