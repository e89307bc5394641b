"""
Planet escalation: rising hostility, weather damage and biome mutation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, List, Mapping, Optional, Tuple

from ..core.types import Biome, HexCoord
from ..core.rules import DEFAULT_RULES, GameRules

if TYPE_CHECKING:
    from ..world.world import WorldState

SHELTERED_WEATHER_FACTOR = 5
EXPOSED_WEATHER_FACTOR = 15
MUTATION_FACTOR = 0.1

# Biomes degrade toward more hostile types
MUTATIONS: Mapping[Biome, Tuple[Biome, ...]] = MappingProxyType({
    Biome.FLATS: (Biome.FUNGAL_MARSH, Biome.VENT_FIELDS),
    Biome.BIOLUME_FOREST: (Biome.FUNGAL_MARSH, Biome.VENT_FIELDS),
    Biome.CRYSTAL_RIDGE: (Biome.VENT_FIELDS, Biome.SCAR),
    Biome.FUNGAL_MARSH: (Biome.VENT_FIELDS, Biome.CHASM),
    Biome.VENT_FIELDS: (Biome.SCAR, Biome.CHASM),
    Biome.RUIN: (Biome.SCAR, Biome.VENT_FIELDS),
})

STABLE_BIOMES = (Biome.CHASM, Biome.SCAR)


@dataclass
class Mutation:
    coord: HexCoord
    before: Biome
    after: Biome


def weather_damage(hostility: float, sheltered: bool) -> int:
    if hostility <= 0:
        return 0
    factor = SHELTERED_WEATHER_FACTOR if sheltered else EXPOSED_WEATHER_FACTOR
    return math.floor(hostility * factor)


def escalate(hostility: float, rules: GameRules = DEFAULT_RULES) -> float:
    """Hostility after one more tick, capped at 1.0."""
    return min(1.0, hostility + rules.hostility_step)


def should_mutate(hostility: float, rng) -> bool:
    return rng.random() < hostility * MUTATION_FACTOR


def mutate_biome(biome: Biome, rng) -> Biome:
    options = MUTATIONS.get(biome)
    if not options:
        return biome
    return rng.choice(options)


def apply_mutations(world: WorldState, hostility: Optional[float] = None) -> List[Mutation]:
    """
    Roll a mutation for every hex except chasm, scar and the hull.

    The tick passes the hostility it started with; defaults to the world's.
    """
    if hostility is None:
        hostility = world.hostility
    mutations: List[Mutation] = []
    for hex_ in world.hexes:
        if hex_.biome in STABLE_BIOMES or hex_.coord == world.hull:
            continue
        if not should_mutate(hostility, world.rng):
            continue
        before = hex_.biome
        hex_.biome = mutate_biome(before, world.rng)
        if hex_.biome != before:
            mutations.append(Mutation(hex_.coord, before, hex_.biome))
    return mutations
