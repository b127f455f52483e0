import pytest

from geo_engine.models import Coordinate
from geo_engine.polygon import point_in_polygon

SQUARE = [
    Coordinate(longitude=0, latitude=0),
    Coordinate(longitude=0, latitude=10),
    Coordinate(longitude=10, latitude=10),
    Coordinate(longitude=10, latitude=0),
]


def test_point_inside_square() -> None:
    assert point_in_polygon(Coordinate(longitude=5, latitude=5), SQUARE)


def test_point_outside_square() -> None:
    assert not point_in_polygon(Coordinate(longitude=15, latitude=15), SQUARE)


def test_point_in_concave_notch_is_outside() -> None:
    u_shape = [
        Coordinate(longitude=0, latitude=0),
        Coordinate(longitude=10, latitude=0),
        Coordinate(longitude=10, latitude=10),
        Coordinate(longitude=7, latitude=10),
        Coordinate(longitude=7, latitude=3),
        Coordinate(longitude=3, latitude=3),
        Coordinate(longitude=3, latitude=10),
        Coordinate(longitude=0, latitude=10),
    ]
    assert not point_in_polygon(Coordinate(longitude=5, latitude=6), u_shape)
    assert point_in_polygon(Coordinate(longitude=1, latitude=6), u_shape)


def test_closed_ring_gives_same_answer_as_open_ring() -> None:
    closed = [*SQUARE, SQUARE[0]]
    point = Coordinate(longitude=2, latitude=8)
    assert point_in_polygon(point, closed) == point_in_polygon(point, SQUARE)


def test_boundary_point_is_deterministic() -> None:
    point = Coordinate(longitude=0, latitude=5)
    first = point_in_polygon(point, SQUARE)
    assert all(point_in_polygon(point, SQUARE) == first for _ in range(5))


def test_polygon_needs_three_vertices() -> None:
    with pytest.raises(ValueError):
        point_in_polygon(Coordinate(longitude=0, latitude=0), SQUARE[:2])
