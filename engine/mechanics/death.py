"""
Death and respawn.

A player whose health reached 0 drops everything at their camp as ruins
loot, is reset to a fresh survivor (discoveries are kept) and respawns as
far as possible from everyone still alive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from ..core.types import HexCoord
from ..core.rules import DEFAULT_RULES, GameRules
from ..world.hexgrid import hex_distance
from infra.logger import get_logger

if TYPE_CHECKING:
    from ..world.hex import Hex
    from ..world.player import Player
    from ..world.world import WorldState

log = get_logger(__name__)


@dataclass
class DeathEvent:
    player_id: str
    died_at: Optional[HexCoord]
    respawn: Optional[HexCoord]
    loot_at: Optional[HexCoord] = None
    loot: Dict[str, int] = field(default_factory=dict)


def collect_loot(player: Player) -> Dict[str, int]:
    """Inventory, stash and any equipped item not already counted in the inventory."""
    loot: Dict[str, int] = {}
    for stacks in (player.inventory, player.stash):
        for item_id, quantity in stacks.items():
            if quantity > 0:
                loot[item_id] = loot.get(item_id, 0) + quantity
    for item_id in player.equipment.values():
        if item_id and item_id not in player.inventory:
            loot[item_id] = loot.get(item_id, 0) + 1
    return loot


def reset_player(player: Player, rules: GameRules = DEFAULT_RULES) -> Dict[str, int]:
    """
    Reset a dead player to a fresh state in place.

    Returns:
        The items the player was carrying or storing
    """
    loot = collect_loot(player)
    player.inventory = {}
    player.stash = {}
    player.equipment = {}
    player.structures = []
    player.camp = None
    player.buffs = {}
    player.health = rules.max_health
    player.energy = rules.starting_energy
    player.is_alive = True
    return loot


def choose_respawn(candidates: Sequence[Hex], occupied: Sequence[HexCoord]) -> Optional[HexCoord]:
    """
    Pick the unoccupied candidate farthest from every occupied position.

    Ties keep map order. With nobody else alive the first candidate wins.
    """
    if not candidates:
        return None
    occupied_set = set(occupied)
    free = [h for h in candidates if h.coord not in occupied_set] or list(candidates)
    if not occupied:
        return free[0].coord

    best = free[0]
    best_distance = min(hex_distance(o, best.coord) for o in occupied)
    for hex_ in free[1:]:
        distance = min(hex_distance(o, hex_.coord) for o in occupied)
        if distance > best_distance:
            best, best_distance = hex_, distance
    return best.coord


class DeathResolver:
    """Stateless resolver for the death & respawn phase."""

    def resolve(self, world: WorldState) -> List[DeathEvent]:
        passable = world.passable_hexes()
        occupied = [p.position for p in world.living_players() if p.position is not None]

        events: List[DeathEvent] = []
        for player in world.players:
            if player.health > 0:
                continue

            died_at = player.position
            camp = player.camp
            loot = reset_player(player, world.rules)

            loot_at = None
            if camp is not None and loot:
                camp_hex = world.get_hex(camp)
                if camp_hex is not None:
                    camp_hex.add_loot(loot)
                    loot_at = camp

            player.position = choose_respawn(passable, occupied)
            if player.position is not None:
                occupied.append(player.position)

            log.debug("Player %s died at %s, respawned at %s", player.id, died_at, player.position)
            events.append(DeathEvent(player.id, died_at, player.position, loot_at, loot))
        return events
