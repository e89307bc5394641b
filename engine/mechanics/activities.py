"""
ActivityResolver - the actions phase.

Applies every non-move, non-attack intent in submission order. Gather and
explore outcomes are fetched beforehand (see TickResolver) and handed in
by action id. Rule violations raised by the economy and launch helpers
forfeit that single action; energy is spent either way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Mapping

from ..core.types import ActionType
from ..core.actions import Action
from ..core.catalog import RESTED, SHIP_PARTS, get_item, get_structure
from ..core.errors import GameError, InventoryFull
from . import economy, launch
from .movement import spend_energy
from .outcomes import HexEvent, fallback_event
from infra.logger import get_logger

if TYPE_CHECKING:
    from ..world.hex import Hex
    from ..world.player import Player
    from ..world.world import WorldState
    from .reporting import TickLedger

log = get_logger(__name__)

PREFETCHED = (ActionType.GATHER, ActionType.EXPLORE)
SKIPPED = (ActionType.MOVE, ActionType.ATTACK)


def grant(player: Player, items: Mapping[str, int], slots: int) -> Dict[str, int]:
    """
    Add whatever fits into the inventory.

    Returns:
        The amounts actually received
    """
    received: Dict[str, int] = {}
    for item_id, amount in items.items():
        if amount <= 0:
            continue
        try:
            player.add_item(item_id, amount, slots=slots)
        except InventoryFull:
            continue
        received[item_id] = amount
    return received


def discovery_label(hex_: Hex) -> str:
    return f"{hex_.definition.name} ({hex_.q},{hex_.r})"


class ActivityResolver:
    """Stateless resolver for the actions phase."""

    def resolve(
            self,
            world: WorldState,
            actions: List[Action],
            events: Mapping[str, HexEvent],
            ledger: TickLedger,
    ) -> None:
        for action in actions:
            if action.type in SKIPPED:
                continue
            player = world.get_player(action.player_id)
            if player is None or not player.is_alive:
                continue

            try:
                self._apply(world, player, action, events, ledger)
            except GameError as exc:
                log.debug("Action %s by %s forfeited: %s", action.type, player.id, exc)
                ledger.note(player.id, f"{action.type.value.replace('_', ' ').capitalize()} failed: {exc}")

            spend_energy(player, action.energy_cost)

    def _apply(
            self,
            world: WorldState,
            player: Player,
            action: Action,
            events: Mapping[str, HexEvent],
            ledger: TickLedger,
    ) -> None:
        rules = world.rules

        if action.type in PREFETCHED:
            hex_ = world.player_hex(player)
            if hex_ is None:
                return
            event = events.get(action.id) or fallback_event(hex_.biome, action.type.value, world.rng)
            self._apply_event(world, player, hex_, event, ledger)
            if action.type == ActionType.EXPLORE:
                self._explore(world, player, hex_, ledger)

        elif action.type == ActionType.SLEEP:
            player.buffs[RESTED] = True
            ledger.note(player.id, "You rest. Tomorrow you will wake with a little more strength.")

        elif action.type == ActionType.BUILD:
            structure_id = action.structure_id
            economy.resolve_build(player, structure_id, rules)
            ledger.note(player.id, f"You built a {get_structure(structure_id).name}.")

        elif action.type == ActionType.CRAFT:
            item_id = action.item_id
            economy.resolve_craft(player, item_id, rules)
            ledger.note(player.id, f"You crafted a {get_item(item_id).name}.")

        elif action.type == ActionType.INSTALL_PART:
            installed = launch.install_part(world, player)
            ledger.note(player.id, f"You installed a ship part ({installed}/{world.parts_required}).")

        elif action.type == ActionType.DEPOSIT:
            economy.deposit(player, action.item_id, action.quantity, rules)

        elif action.type == ActionType.WITHDRAW:
            economy.withdraw(player, action.item_id, action.quantity, rules)

        # HIDE only sets the combat stance

    def _apply_event(self, world: WorldState, player: Player, hex_: Hex, event: HexEvent,
                     ledger: TickLedger) -> None:
        received = grant(player, event.outcomes, world.rules.inventory_slots)
        hex_.record(
            world.tick_number,
            event.narrative,
            limit=world.rules.history_limit,
            max_chars=world.rules.history_summary_chars,
        )
        ledger.note(player.id, event.narrative)
        ledger.add_outcomes(player.id, received)

    def _explore(self, world: WorldState, player: Player, hex_: Hex, ledger: TickLedger) -> None:
        label = discovery_label(hex_)
        if label not in player.discoveries:
            player.discoveries.append(label)

        if hex_.ruins_loot:
            loot = hex_.take_loot()
            received = grant(player, loot, world.rules.inventory_slots)
            leftovers = {k: v for k, v in loot.items() if k not in received}
            hex_.add_loot(leftovers)
            if received:
                ledger.note(player.id, "Among the ruins of an old camp you find supplies someone left behind.")
                ledger.add_outcomes(player.id, received)

        if hex_.ship_part:
            received = grant(player, {SHIP_PARTS: 1}, world.rules.inventory_slots)
            if received:
                hex_.ship_part = False
                ledger.note(player.id, "Half-buried in the debris: an intact ship part.")
                ledger.add_outcomes(player.id, received)


def prefetch_targets(world: WorldState, actions: List[Action]) -> List[Action]:
    """Gather/explore actions whose player is alive and on the map."""
    targets: List[Action] = []
    for action in actions:
        if action.type not in PREFETCHED:
            continue
        player = world.get_player(action.player_id)
        if player is None or not player.is_alive or world.player_hex(player) is None:
            continue
        targets.append(action)
    return targets
