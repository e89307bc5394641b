"""
Upkeep phases: eating, weather exposure and energy recovery.

Each phase walks the living players in join order and records what it
did in a per-player ledger so the reporting phase can narrate it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from ..core.catalog import RATIONS, RESTED
from .escalation import weather_damage

if TYPE_CHECKING:
    from ..world.player import Player
    from ..world.world import WorldState


def _wound(player: Player, damage: int) -> None:
    player.health = max(0, player.health - damage)
    if player.health <= 0:
        player.is_alive = False


def resolve_survival(world: WorldState) -> Dict[str, int]:
    """
    Every living player eats one ration or starves.

    Returns:
        player id -> starvation damage taken (0 when fed)
    """
    damage: Dict[str, int] = {}
    for player in world.living_players():
        if player.quantity(RATIONS) > 0:
            player.remove_item(RATIONS, 1)
            damage[player.id] = 0
        else:
            _wound(player, world.rules.starvation_damage)
            damage[player.id] = world.rules.starvation_damage
    return damage


def resolve_weather(world: WorldState, hostility: float) -> Dict[str, int]:
    """Apply weather exposure for the tick's hostility; returns damage per player."""
    damage: Dict[str, int] = {}
    for player in world.living_players():
        amount = weather_damage(hostility, player.is_sheltered)
        if amount > 0:
            _wound(player, amount)
        damage[player.id] = amount
    return damage


def recovery_amount(player: Player, base_energy: int) -> int:
    gain = base_energy if player.is_sheltered else base_energy - 1
    if player.is_rested:
        gain += 1
    return gain


def resolve_recovery(world: WorldState) -> Dict[str, int]:
    """
    Restore energy: +3 sheltered, +2 otherwise, +1 more when rested.

    Clears the rested buff and caps energy at max_energy.
    """
    gained: Dict[str, int] = {}
    for player in world.living_players():
        before = player.energy
        player.energy = min(world.rules.max_energy,
                            player.energy + recovery_amount(player, world.rules.base_energy_per_tick))
        player.buffs.pop(RESTED, None)
        gained[player.id] = player.energy - before
    return gained
