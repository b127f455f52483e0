from __future__ import annotations

from collections.abc import Sequence

from geo_engine.centroid import bounding_box
from geo_engine.models import Coordinate


def point_in_polygon(point: Coordinate, polygon: Sequence[Coordinate]) -> bool:
    """Ray-casting containment test.

    The ring is closed implicitly, so the last vertex need not repeat the first.
    Points exactly on an edge or vertex get a deterministic but unspecified answer.
    """
    if len(polygon) < 3:
        raise ValueError("polygon must have at least 3 vertices")

    min_lng, min_lat, max_lng, max_lat = bounding_box(polygon)
    x = point.longitude
    y = point.latitude
    if x < min_lng or x > max_lng or y < min_lat or y > max_lat:
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].longitude, polygon[i].latitude
        xj, yj = polygon[j].longitude, polygon[j].latitude
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside
