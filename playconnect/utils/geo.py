"""
Great-circle distance helpers
"""

import math

EARTH_RADIUS_KM = 6371


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance on a spherical Earth, in meters.

    Non-finite inputs yield NaN; validating coordinates is up to the caller.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_KM * c * 1000


def format_distance(meters: float) -> str:
    """``950m`` below a kilometer, ``1.5km`` from there on"""
    if meters < 1000:
        # half-up, not banker's rounding
        return f"{math.floor(meters + 0.5)}m"
    return f"{meters / 1000:.1f}km"
