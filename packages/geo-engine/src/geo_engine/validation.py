from __future__ import annotations

import math
from numbers import Real

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0


def is_valid_coordinate(longitude: object, latitude: object) -> bool:
    if not _is_finite_number(longitude) or not _is_finite_number(latitude):
        return False
    return MIN_LONGITUDE <= longitude <= MAX_LONGITUDE and MIN_LATITUDE <= latitude <= MAX_LATITUDE


def _is_finite_number(value: object) -> bool:
    # bool is an int subclass; True is not a longitude
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)
