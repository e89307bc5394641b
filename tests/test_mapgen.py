import random
from itertools import combinations

from engine.core.catalog import is_passable
from engine.core.types import Biome
from engine.mechanics.mapgen import generate_map, map_radius, pick_weighted, INNER_RING_WEIGHTS
from engine.world.hexgrid import hex_count, hex_distance

from helpers import StubRng


def test_radius_fits_nine_hexes_per_player():
    assert map_radius(3) == 3
    assert map_radius(6) == 4
    assert map_radius(20) == 8


def test_six_player_map_shape():
    generated = generate_map(6, random.Random(42))
    radius = generated.radius

    assert len(generated.hexes) == hex_count(radius)
    assert len({h.coord for h in generated.hexes}) == len(generated.hexes)

    center = [h for h in generated.hexes if hex_distance(generated.hull, h.coord) == 0]
    assert len(center) == 1
    assert center[0].biome == Biome.SCAR
    assert not center[0].ship_part

    outer = [h for h in generated.hexes if hex_distance(generated.hull, h.coord) == radius]
    assert outer and all(h.biome == Biome.CHASM for h in outer)


def test_six_player_spawns_are_spread_and_passable():
    generated = generate_map(6, random.Random(42))

    assert len(generated.spawns) == 6
    for coord in generated.spawns:
        assert is_passable(generated.hex_at(coord).biome)
        assert 2 <= hex_distance(generated.hull, coord) < generated.radius
    for a, b in combinations(generated.spawns, 2):
        assert hex_distance(a, b) >= 2


def test_ship_parts_match_requirement():
    generated = generate_map(6, random.Random(7))
    assert generated.seats == 2
    assert generated.parts_required == 4
    assert sum(1 for h in generated.hexes if h.ship_part) == 4


def test_generation_is_deterministic_for_a_seed():
    first = generate_map(8, random.Random(99))
    second = generate_map(8, random.Random(99))
    assert [h.to_dict() for h in first.hexes] == [h.to_dict() for h in second.hexes]
    assert first.spawns == second.spawns


def test_flats_are_converted_when_no_part_biome_exists():
    # 0.35 rolls flats on the inner ring and biolume forest further out
    generated = generate_map(3, StubRng(default=0.35))

    assert generated.stats["converted_to_ruin"] == 2
    parts = [h for h in generated.hexes if h.ship_part]
    assert len(parts) == generated.parts_required == 2
    assert all(h.biome == Biome.RUIN for h in parts)
    assert len(generated.spawns) == 3


def test_pick_weighted_walks_the_table():
    assert pick_weighted(INNER_RING_WEIGHTS, StubRng(default=0.0)) == Biome.SCAR
    assert pick_weighted(INNER_RING_WEIGHTS, StubRng(default=0.35)) == Biome.FLATS
    assert pick_weighted(INNER_RING_WEIGHTS, StubRng(default=0.99)) == Biome.CRYSTAL_RIDGE
