from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    longitude: float
    latitude: float
