"""
CombatResolver - Combat phase.

Combat in Meridian is a single exchange between two survivors on the same
hex. The defender's stance is the first action it queued for the tick:
hiding can avoid the fight entirely, attacking back produces a full
counter, anything else only a weak passive counter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..core.types import ActionType, Biome, CombatOutcome, EquipmentSlot
from ..core.actions import Action
from ..core.errors import InventoryFull
from .movement import spend_energy
from infra.logger import get_logger

if TYPE_CHECKING:
    from ..world.player import Player
    from ..world.world import WorldState

log = get_logger(__name__)

BASE_DAMAGE = 15
DAMAGE_VARIANCE = 10
PASSIVE_COUNTER_MAX = 7

BASE_STEALTH = 20
STEALTH_CAP = 95

WEAPON_BONUS: Dict[str, int] = {
    "crystal_blade": 20,
    "makeshift_knife": 5,
}

ARMOR_REDUCTION: Dict[str, int] = {
    "chitin_shield": 10,
    "spore_suit": 5,
}

BIOME_DEFENSE_BONUS: Dict[Biome, int] = {
    Biome.BIOLUME_FOREST: 5,
    Biome.FUNGAL_MARSH: 8,
    Biome.CRYSTAL_RIDGE: 3,
}

STEALTH_BONUS: Dict[str, int] = {
    "spore_suit": 30,
}

BIOME_STEALTH_BONUS: Dict[Biome, int] = {
    Biome.FUNGAL_MARSH: 25,
    Biome.BIOLUME_FOREST: 15,
}

IDLE = "idle"


@dataclass
class CombatContext:
    biome: Biome
    hostility: float = 0.0


@dataclass
class CombatResult:
    """
    Outcome of one attack.

    Attributes:
        attacker_damage: Damage dealt to the attacker by the counter
        defender_damage: Damage dealt to the defender
        attacker_dead: Attacker health would reach 0
        defender_dead: Defender health would reach 0
        evaded: Defender hid successfully; nobody took damage
        outcome: Result from the attacker's point of view
        looted_item: Item id taken on a decisive win, if any
    """
    attacker_damage: int
    defender_damage: int
    attacker_dead: bool
    defender_dead: bool
    evaded: bool
    outcome: CombatOutcome
    looted_item: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attacker_damage": self.attacker_damage,
            "defender_damage": self.defender_damage,
            "attacker_dead": self.attacker_dead,
            "defender_dead": self.defender_dead,
            "evaded": self.evaded,
            "outcome": self.outcome.value,
            "looted_item": self.looted_item,
        }


def _bonus(player: Player, slot: EquipmentSlot, table: Dict[str, int]) -> int:
    item_id = player.equipped(slot)
    return table.get(item_id, 0) if item_id else 0


def stealth_chance(hider: Player, context: CombatContext) -> int:
    """Percent chance that a hiding defender evades."""
    chance = BASE_STEALTH
    chance += _bonus(hider, EquipmentSlot.SUIT, STEALTH_BONUS)
    chance += BIOME_STEALTH_BONUS.get(context.biome, 0)
    return min(STEALTH_CAP, chance)


def classify(defender_damage: int, attacker_damage: int, attacker_dead: bool, defender_dead: bool) -> CombatOutcome:
    if defender_dead and not attacker_dead:
        return CombatOutcome.DECISIVE_WIN
    ratio = defender_damage / max(1, attacker_damage)
    if ratio >= 2:
        return CombatOutcome.DECISIVE_WIN
    if ratio >= 1.2:
        return CombatOutcome.CLOSE_WIN
    if ratio >= 0.8:
        return CombatOutcome.STALEMATE
    return CombatOutcome.LOSS


def resolve_combat(
        attacker: Player,
        defender: Player,
        attacker_stance: str,
        defender_stance: str,
        context: CombatContext,
        rng,
) -> CombatResult:
    """
    Roll one exchange. Pure: neither player is modified.

    Args:
        attacker: Player initiating the attack
        defender: Player being attacked
        attacker_stance: Always "attack" for now
        defender_stance: Defender's own action this tick ("hide", "attack", ... or "idle")
        context: Biome and hostility of the hex
        rng: Random source
    """
    if defender_stance == ActionType.HIDE.value:
        if rng.random() * 100 < stealth_chance(defender, context):
            return CombatResult(
                attacker_damage=0,
                defender_damage=0,
                attacker_dead=False,
                defender_dead=False,
                evaded=True,
                outcome=CombatOutcome.EVADED,
            )

    attack_roll = BASE_DAMAGE + _bonus(attacker, EquipmentSlot.WEAPON, WEAPON_BONUS) + rng.randrange(DAMAGE_VARIANCE)
    armor = _bonus(defender, EquipmentSlot.SUIT, ARMOR_REDUCTION)
    defender_damage = max(1, attack_roll - armor - BIOME_DEFENSE_BONUS.get(context.biome, 0))

    attacker_damage = 0
    if defender_stance == ActionType.ATTACK.value:
        counter_roll = BASE_DAMAGE + _bonus(defender, EquipmentSlot.WEAPON, WEAPON_BONUS) + rng.randrange(DAMAGE_VARIANCE)
        attacker_damage = max(1, counter_roll - _bonus(attacker, EquipmentSlot.SUIT, ARMOR_REDUCTION))
    elif defender_stance != ActionType.HIDE.value:
        attacker_damage = rng.randint(0, PASSIVE_COUNTER_MAX)

    defender_dead = defender.health - defender_damage <= 0
    attacker_dead = attacker.health - attacker_damage <= 0
    outcome = classify(defender_damage, attacker_damage, attacker_dead, defender_dead)

    looted_item = None
    if outcome == CombatOutcome.DECISIVE_WIN and defender.inventory:
        looted_item = rng.choice(list(defender.inventory))

    return CombatResult(
        attacker_damage=attacker_damage,
        defender_damage=defender_damage,
        attacker_dead=attacker_dead,
        defender_dead=defender_dead,
        evaded=False,
        outcome=outcome,
        looted_item=looted_item,
    )


@dataclass
class CombatEvent:
    """One resolved attack inside a tick."""
    attacker_id: str
    defender_id: Optional[str]
    result: Optional[CombatResult]

    def summary(self, world: WorldState) -> str:
        if self.defender_id is None or self.result is None:
            return "You swung at shadows. Nobody was there."
        defender = world.get_player(self.defender_id)
        name = defender.name if defender else self.defender_id
        if self.result.evaded:
            return f"{name} slipped out of sight before you could strike."
        text = f"You attacked {name}: {self.result.outcome}."
        if self.result.looted_item:
            text += f" You took their {self.result.looted_item}."
        return text


def defender_stance(actions: List[Action], player_id: str) -> str:
    """Type of the first action the defender queued this tick, or idle."""
    for action in actions:
        if action.player_id == player_id:
            return action.type.value
    return IDLE


class CombatResolver:
    """Stateless resolver for the combat phase."""

    def resolve(self, world: WorldState, actions: List[Action]) -> List[CombatEvent]:
        events: List[CombatEvent] = []
        for action in actions:
            if action.type != ActionType.ATTACK:
                continue
            attacker = world.get_player(action.player_id)
            if attacker is None or not attacker.is_alive:
                continue

            spend_energy(attacker, action.energy_cost)

            targets = [p for p in world.players_at(attacker.position) if p.id != attacker.id]
            if not targets:
                events.append(CombatEvent(attacker.id, None, None))
                continue

            defender = targets[0]
            hex_ = world.player_hex(attacker)
            context = CombatContext(
                biome=hex_.biome if hex_ else Biome.FLATS,
                hostility=world.hostility,
            )
            stance = defender_stance(actions, defender.id)
            result = resolve_combat(attacker, defender, ActionType.ATTACK.value, stance, context, world.rng)

            attacker.health = max(0, attacker.health - result.attacker_damage)
            defender.health = max(0, defender.health - result.defender_damage)
            if result.attacker_dead:
                attacker.is_alive = False
            if result.defender_dead:
                defender.is_alive = False

            if result.looted_item:
                self._transfer_loot(attacker, defender, result, world)

            log.debug("Combat %s -> %s (%s): %s", attacker.id, defender.id, stance, result.outcome)
            events.append(CombatEvent(attacker.id, defender.id, result))
        return events

    @staticmethod
    def _transfer_loot(attacker: Player, defender: Player, result: CombatResult, world: WorldState) -> None:
        item_id = result.looted_item
        try:
            attacker.add_item(item_id, 1, slots=world.rules.inventory_slots)
        except InventoryFull:
            log.debug("Loot %s dropped: %s has no free slot", item_id, attacker.id)
            result.looted_item = None
            return
        defender.remove_item(item_id, 1)
