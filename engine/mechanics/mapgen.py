"""
Map generation.

Builds a hexagonal map sized for the player count: the crashed hull at
the center, a safer inner ring, a mixed middle and an impassable chasm
border. Places ship parts and picks spread-out spawn points. Generation
is total: it never fails for a valid player count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from ..core.types import Biome, HexCoord
from ..core.catalog import is_passable
from ..core.rules import DEFAULT_RULES, GameRules, calculate_required_parts, calculate_seats
from ..world.hex import Hex
from ..world.hexgrid import ORIGIN, hex_count, hex_distance, ring
from infra.logger import get_logger

log = get_logger(__name__)

INNER_RING_WEIGHTS: Tuple[Tuple[Biome, int], ...] = (
    (Biome.SCAR, 30),
    (Biome.FLATS, 30),
    (Biome.BIOLUME_FOREST, 25),
    (Biome.CRYSTAL_RIDGE, 15),
)

MIDDLE_WEIGHTS: Tuple[Tuple[Biome, int], ...] = (
    (Biome.FLATS, 25),
    (Biome.BIOLUME_FOREST, 20),
    (Biome.CRYSTAL_RIDGE, 15),
    (Biome.FUNGAL_MARSH, 10),
    (Biome.VENT_FIELDS, 10),
    (Biome.RUIN, 12),
    (Biome.SCAR, 8),
)

PART_BIOMES = (Biome.SCAR, Biome.RUIN)
MIN_SPAWN_SEPARATION = 2
SPAWN_ATTEMPTS = 4


@dataclass
class GeneratedMap:
    """Output of generate_map; hexes are in ring order starting with the hull."""
    hexes: List[Hex]
    hull: HexCoord
    spawns: List[HexCoord]
    radius: int
    seats: int
    parts_required: int
    stats: Dict[str, Any] = field(default_factory=dict)

    def hex_at(self, coord: HexCoord) -> Hex | None:
        for h in self.hexes:
            if h.coord == coord:
                return h
        return None


def map_radius(player_count: int, rules: GameRules = DEFAULT_RULES) -> int:
    """Smallest radius whose filled hexagon holds hexes_per_player * player_count."""
    target = rules.hexes_per_player * player_count
    radius = 1
    while hex_count(radius) < target:
        radius += 1
    return radius


def pick_weighted(weights: Sequence[Tuple[Biome, int]], rng) -> Biome:
    total = sum(w for _, w in weights)
    roll = rng.random() * total
    for biome, weight in weights:
        roll -= weight
        if roll <= 0:
            return biome
    return weights[0][0]


def _place_ship_parts(hexes: List[Hex], hull: HexCoord, parts_required: int, rng) -> int:
    """Mark parts on scar/ruin hexes, converting other hexes to ruins if short."""
    eligible = [h for h in hexes if h.biome in PART_BIOMES and h.coord != hull]
    rng.shuffle(eligible)
    for h in eligible[:parts_required]:
        h.ship_part = True

    shortfall = parts_required - min(parts_required, len(eligible))
    converted = 0
    if shortfall > 0:
        flats = [h for h in hexes if h.biome == Biome.FLATS and h.coord != hull]
        rng.shuffle(flats)
        others = [
            h for h in hexes
            if h.coord != hull and h.passable and not h.ship_part and h.biome != Biome.FLATS
        ]
        rng.shuffle(others)
        for h in (flats + others)[:shortfall]:
            h.biome = Biome.RUIN
            h.ship_part = True
            converted += 1
    return converted


def _greedy_spawns(candidates: List[Hex], player_count: int) -> List[Hex]:
    spawns: List[Hex] = []
    for candidate in candidates:
        if len(spawns) >= player_count:
            break
        if all(hex_distance(s.coord, candidate.coord) >= MIN_SPAWN_SEPARATION for s in spawns):
            spawns.append(candidate)
    return spawns


def _select_spawns(hexes: List[Hex], radius: int, player_count: int, rng) -> List[HexCoord]:
    candidates = [
        h for h in hexes
        if h.passable and 2 <= hex_distance(ORIGIN, h.coord) < radius
    ]
    if not candidates:
        candidates = [h for h in hexes if h.passable]

    best: List[Hex] = []
    for _ in range(SPAWN_ATTEMPTS):
        rng.shuffle(candidates)
        spawns = _greedy_spawns(candidates, player_count)
        if len(spawns) > len(best):
            best = spawns
        if len(best) >= player_count:
            break

    if len(best) < player_count:
        log.debug("Relaxing spawn separation: %d/%d spread spawns", len(best), player_count)
        chosen = {h.coord for h in best}
        for candidate in candidates:
            if len(best) >= player_count:
                break
            if candidate.coord not in chosen:
                best.append(candidate)
                chosen.add(candidate.coord)

    # Tiny maps: reuse candidates so that every player gets a spawn
    index = 0
    while len(best) < player_count:
        best.append(candidates[index % len(candidates)])
        index += 1

    return [h.coord for h in best[:player_count]]


def generate_map(player_count: int, rng, rules: GameRules = DEFAULT_RULES) -> GeneratedMap:
    """
    Generate a map for ``player_count`` players.

    Args:
        player_count: Number of players (min_players..max_players)
        rng: Random source
        rules: Balance knobs

    Returns:
        GeneratedMap with hexes, hull, one spawn per player and part counts

    Raises:
        ValueError: If player_count is not positive
    """
    if player_count <= 0:
        raise ValueError(f"player_count must be positive, got {player_count}")

    radius = map_radius(player_count, rules)
    hull = ORIGIN

    hexes: List[Hex] = [Hex(q=hull[0], r=hull[1], biome=Biome.SCAR)]
    for k in range(1, radius + 1):
        for q, r in ring(ORIGIN, k):
            if k == radius:
                biome = Biome.CHASM
            elif k == 1:
                biome = pick_weighted(INNER_RING_WEIGHTS, rng)
            else:
                biome = pick_weighted(MIDDLE_WEIGHTS, rng)
            hexes.append(Hex(q=q, r=r, biome=biome))

    seats = calculate_seats(player_count, rules)
    parts_required = calculate_required_parts(player_count, rules)
    converted = _place_ship_parts(hexes, hull, parts_required, rng)
    spawns = _select_spawns(hexes, radius, player_count, rng)

    stats = {
        "hexes": len(hexes),
        "passable": sum(1 for h in hexes if is_passable(h.biome)),
        "ship_parts": sum(1 for h in hexes if h.ship_part),
        "converted_to_ruin": converted,
    }
    log.info(
        "Generated map: players=%d radius=%d hexes=%d parts=%d seats=%d",
        player_count, radius, stats["hexes"], parts_required, seats,
    )

    return GeneratedMap(
        hexes=hexes,
        hull=hull,
        spawns=spawns,
        radius=radius,
        seats=seats,
        parts_required=parts_required,
        stats=stats,
    )
