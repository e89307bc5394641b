import math

from engine.world.hexgrid import (
    DIRECTIONS,
    ORIGIN,
    axial_to_pixel,
    hex_count,
    hex_distance,
    is_adjacent,
    neighbors,
    pixel_to_axial,
    ring,
    spiral,
)


def test_distance_matches_cube_metric():
    assert hex_distance((0, 0), (0, 0)) == 0
    assert hex_distance((0, 0), (1, 0)) == 1
    assert hex_distance((0, 0), (2, -1)) == 2
    assert hex_distance((-1, 1), (1, -1)) == 2
    assert hex_distance((3, -1), (-2, 4)) == 5


def test_neighbors_are_the_six_adjacent_hexes():
    around = neighbors((2, -3))
    assert len(set(around)) == len(DIRECTIONS) == 6
    assert all(is_adjacent((2, -3), n) for n in around)


def test_rings_and_spiral_cover_the_hexagon():
    assert ring(ORIGIN, 0) == [ORIGIN]
    second = ring(ORIGIN, 2)
    assert len(second) == 12
    assert all(hex_distance(ORIGIN, c) == 2 for c in second)

    filled = spiral(ORIGIN, 3)
    assert len(filled) == len(set(filled)) == hex_count(3) == 37


def test_pixel_round_trip_is_identity_on_integer_coordinates():
    for q in range(-6, 7):
        for r in range(-6, 7):
            x, y = axial_to_pixel((q, r))
            assert pixel_to_axial(x, y) == (q, r)


def test_pointy_top_layout():
    assert axial_to_pixel(ORIGIN) == (0.0, 0.0)
    x, y = axial_to_pixel((1, 0))
    assert math.isclose(x, 40 * math.sqrt(3))
    assert y == 0
    x, y = axial_to_pixel((0, 1), size=10)
    assert math.isclose(x, 10 * math.sqrt(3) / 2)
    assert math.isclose(y, 15)
