from __future__ import annotations

from collections.abc import Sequence

from geo_engine.models import Coordinate


def centroid(points: Sequence[Coordinate]) -> Coordinate:
    """Planar mean of the points.

    Not a geodesic centroid: fine for short-range clustering, wrong across the
    antimeridian.
    """
    if not points:
        raise ValueError("points must not be empty")
    if len(points) == 1:
        return points[0]
    total_lng = sum(point.longitude for point in points)
    total_lat = sum(point.latitude for point in points)
    return Coordinate(longitude=total_lng / len(points), latitude=total_lat / len(points))


def bounding_box(points: Sequence[Coordinate]) -> tuple[float, float, float, float]:
    if not points:
        raise ValueError("points must not be empty")
    longitudes = [point.longitude for point in points]
    latitudes = [point.latitude for point in points]
    return min(longitudes), min(latitudes), max(longitudes), max(latitudes)
