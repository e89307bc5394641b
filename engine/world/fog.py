"""
Fog of war.

A hex is visible if it lies within vision range of the observer or of any
living faction ally. Pure functions only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, TypeVar

from .hexgrid import hex_distance
from ..core.catalog import SCANNER_ARRAY
from ..core.rules import DEFAULT_RULES, GameRules
from ..core.types import HexCoord

if TYPE_CHECKING:
    from .player import Player
    from .world import WorldState

H = TypeVar("H")


def _coord_of(item) -> HexCoord:
    if hasattr(item, "coord"):
        return item.coord
    return tuple(item)


def visible_hexes(
        observer: HexCoord,
        scanner_bonus: int,
        ally_positions: Sequence[HexCoord],
        hexes: Iterable[H],
        base_range: int = DEFAULT_RULES.base_vision_range,
) -> List[H]:
    """
    Filter ``hexes`` down to those visible from the observer or its allies.

    Args:
        observer: The observing player's position
        scanner_bonus: Extra range (0 or 1)
        ally_positions: Positions of allied observers
        hexes: Hex objects (anything with ``.coord``) or raw coordinates
        base_range: Vision range without bonuses

    Returns:
        The visible subset, in input order
    """
    vision = base_range + scanner_bonus
    observers = [observer, *ally_positions]
    return [
        h for h in hexes
        if any(hex_distance(obs, _coord_of(h)) <= vision for obs in observers)
    ]


def scanner_bonus(player: Player, rules: GameRules = DEFAULT_RULES) -> int:
    """+1 while standing at a camp with a scanner array."""
    if player.at_camp and player.has_structure(SCANNER_ARRAY):
        return rules.scanner_vision_bonus
    return 0


def ally_positions(world: WorldState, player_id: str) -> List[HexCoord]:
    positions: List[HexCoord] = []
    for ally_id in world.factions.allies_of(player_id):
        ally = world.get_player(ally_id)
        if ally is not None and ally.is_alive and ally.position is not None:
            positions.append(ally.position)
    return positions


def player_vision(world: WorldState, player_id: str) -> List:
    """Hexes the given player can currently see (empty if unplaced)."""
    player = world.get_player(player_id)
    if player is None or player.position is None:
        return []
    return visible_hexes(
        player.position,
        scanner_bonus(player, world.rules),
        ally_positions(world, player_id),
        world.hexes,
        base_range=world.rules.base_vision_range,
    )


def can_see(world: WorldState, player_id: str, coord: HexCoord) -> bool:
    coord = tuple(coord)
    return any(h.coord == coord for h in player_vision(world, player_id))


def visible_players(world: WorldState, player_id: str) -> List[Player]:
    """Other living players standing on hexes the player can see."""
    seen = {h.coord for h in player_vision(world, player_id)}
    return [
        p for p in world.living_players()
        if p.id != player_id and p.position in seen
    ]


__all__ = [
    "visible_hexes",
    "scanner_bonus",
    "ally_positions",
    "player_vision",
    "can_see",
    "visible_players",
]
