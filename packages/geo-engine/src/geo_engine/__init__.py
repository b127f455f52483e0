"""Geo engine core package."""

from geo_engine.centroid import bounding_box, centroid
from geo_engine.distance import EARTH_RADIUS_METERS, haversine_distance_meters, to_radians
from geo_engine.models import Coordinate
from geo_engine.polygon import point_in_polygon
from geo_engine.validation import is_valid_coordinate

__all__ = [
    "Coordinate",
    "EARTH_RADIUS_METERS",
    "bounding_box",
    "centroid",
    "haversine_distance_meters",
    "is_valid_coordinate",
    "point_in_polygon",
    "to_radians",
]
