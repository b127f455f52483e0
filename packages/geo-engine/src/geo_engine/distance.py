import math

from geo_engine.models import Coordinate

EARTH_RADIUS_METERS = 6_371_000


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def haversine_distance_meters(start: Coordinate, end: Coordinate) -> float:
    """Great-circle distance on a spherical Earth.

    Callers validate both points first; nothing is re-checked here.
    """
    start_lat = to_radians(start.latitude)
    end_lat = to_radians(end.latitude)
    delta_lat = to_radians(end.latitude - start.latitude)
    delta_lng = to_radians(end.longitude - start.longitude)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lng / 2) ** 2
    )
    # rounding can push near-antipodal pairs just past 1.0
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c
