"""
Geofence helpers - great-circle distance between WGS-84 coordinates
"""
import math

from app.core.exceptions import InvalidCoordinateException

EARTH_RADIUS_M = 6371000.0


def _coordinate(value, name: str, bound: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinateException(f"{name} must be a number", {"field": name})
    if not math.isfinite(number):
        raise InvalidCoordinateException(f"{name} must be finite", {"field": name})
    if abs(number) > bound:
        raise InvalidCoordinateException(f"{name} out of range", {"field": name, "value": number})
    return number


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_m: float = EARTH_RADIUS_M
) -> float:
    """
    Calculate distance between two coordinates using Haversine formula

    Returns:
        float: Distance in meters

    Raises:
        InvalidCoordinateException: If any coordinate is non-finite or out of bounds
    """
    lat1 = _coordinate(lat1, "lat1", 90)
    lon1 = _coordinate(lon1, "lon1", 180)
    lat2 = _coordinate(lat2, "lat2", 90)
    lon2 = _coordinate(lon2, "lon2", 180)

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_m * c
