"""Builders and scripted random sources shared by the tests."""

from __future__ import annotations

import random
from typing import Any, Iterable, Optional, Sequence, Tuple

from engine.core.types import Biome, GameStatus, HexCoord
from engine.world.hex import Hex
from engine.world.player import Player
from engine.world.world import WorldState

SMALL_MAP: Tuple[Tuple[HexCoord, Biome], ...] = (
    ((0, 0), Biome.SCAR),
    ((1, 0), Biome.FLATS),
    ((0, 1), Biome.BIOLUME_FOREST),
    ((-1, 0), Biome.CRYSTAL_RIDGE),
    ((-1, 1), Biome.FUNGAL_MARSH),
    ((0, -1), Biome.VENT_FIELDS),
    ((1, -1), Biome.RUIN),
    ((2, 0), Biome.FLATS),
    ((2, -1), Biome.CHASM),
)


class StubRng:
    """
    Scripted random source.

    random() pops scripted values, then returns ``default``; randrange and
    randint return fixed picks clamped to the requested range; choice takes
    the first element and shuffle keeps the order.
    """

    def __init__(self, randoms: Sequence[float] = (), default: float = 0.5,
                 randrange_value: int = 0, randint_value: Optional[int] = None):
        self._randoms = list(randoms)
        self.default = default
        self.randrange_value = randrange_value
        self.randint_value = randint_value

    def random(self) -> float:
        return self._randoms.pop(0) if self._randoms else self.default

    def randrange(self, n: int) -> int:
        return min(self.randrange_value, n - 1)

    def randint(self, a: int, b: int) -> int:
        if self.randint_value is None:
            return a
        return max(a, min(b, self.randint_value))

    def choice(self, seq):
        return seq[0]

    def shuffle(self, seq) -> None:
        pass


def make_player(player_id: str, position: Optional[HexCoord] = (0, 0), **overrides: Any) -> Player:
    """Fed player with a lean-to camp at its position."""
    data = dict(
        id=player_id,
        name=f"Player {player_id}",
        position=position,
        camp=position,
        inventory={"rations": 5},
        structures=["lean_to"],
    )
    data.update(overrides)
    return Player(**data)


def build_world(
        players: Iterable[Player] = (),
        hexes: Sequence[Tuple[HexCoord, Biome]] = SMALL_MAP,
        rng: Any = None,
        hostility: float = 0.0,
        tick_number: int = 1,
) -> WorldState:
    world = WorldState(game_id="g1", code="ABCDEF", name="Test", rng=rng or random.Random(1))
    world.set_hexes(Hex(q=q, r=r, biome=biome) for (q, r), biome in hexes)
    world.status = GameStatus.ACTIVE
    world.tick_number = tick_number
    world.hostility = hostility
    world.radius = 2
    world.seats = 2
    world.parts_required = 4
    for player in players:
        world.add_player(player)
    return world
