"""
Building, crafting and stash transfers.

Every function mutates the given player in place and raises an
EconomyError subclass, leaving the player untouched, when the request is
not possible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.catalog import STASH, WORKBENCH, get_item, get_structure
from ..core.errors import (
    InsufficientMaterials,
    InventoryFull,
    MaxStructuresReached,
    MissingStash,
    MissingWorkbench,
    NotAtCamp,
    UnknownItem,
    UnknownStructure,
)
from ..core.rules import DEFAULT_RULES, GameRules

if TYPE_CHECKING:
    from ..world.player import Player


def resolve_build(player: Player, structure_id: str, rules: GameRules = DEFAULT_RULES) -> None:
    """
    Build a structure at the player's camp.

    The first build founds the camp at the current position.

    Raises:
        UnknownStructure, MaxStructuresReached, InsufficientMaterials
    """
    structure = get_structure(structure_id)
    if structure is None:
        raise UnknownStructure(f"Unknown structure: {structure_id}")
    if len(player.structures) >= rules.max_structures:
        raise MaxStructuresReached(f"Already at maximum structures ({rules.max_structures})")

    player.consume(structure.cost)

    if player.camp is None:
        player.camp = player.position
    player.structures.append(structure_id)


def resolve_craft(player: Player, item_id: str, rules: GameRules = DEFAULT_RULES) -> None:
    """
    Craft one item and auto-equip it if its slot is free.

    Raises:
        UnknownItem, MissingWorkbench, InsufficientMaterials, InventoryFull
    """
    item = get_item(item_id)
    if item is None:
        raise UnknownItem(f"Unknown item: {item_id}")
    if WORKBENCH not in player.structures:
        raise MissingWorkbench("Crafting requires a workbench at your camp")
    if not player.has_items(item.materials):
        missing = next(r for r, n in item.materials.items() if player.quantity(r) < n)
        raise InsufficientMaterials(
            f"Not enough {missing} (need {item.materials[missing]}, have {player.quantity(missing)})"
        )

    # Stacks emptied by the materials free their slots
    remaining = dict(player.inventory)
    for resource, amount in item.materials.items():
        remaining[resource] -= amount
    in_use = sum(1 for v in remaining.values() if v > 0)
    if remaining.get(item_id, 0) <= 0 and in_use >= rules.inventory_slots:
        raise InventoryFull(f"No free slot for {item_id}")

    player.consume(item.materials)
    player.add_item(item_id, 1, slots=rules.inventory_slots)
    player.equip(item.slot, item_id)


def _require_stash(player: Player) -> None:
    if STASH not in player.structures:
        raise MissingStash("You have not built a stash")
    if not player.at_camp:
        raise NotAtCamp("You must be at your camp to use the stash")


def deposit(player: Player, item_id: str, quantity: int = 1, rules: GameRules = DEFAULT_RULES) -> None:
    """
    Move items from inventory into the stash.

    Raises:
        MissingStash, NotAtCamp, InsufficientMaterials, InventoryFull
    """
    _require_stash(player)
    if quantity <= 0 or player.quantity(item_id) < quantity:
        raise InsufficientMaterials(
            f"Not enough {item_id} to deposit (need {quantity}, have {player.quantity(item_id)})"
        )
    player.stash_item(item_id, quantity, slots=rules.stash_slots)
    player.remove_item(item_id, quantity)


def withdraw(player: Player, item_id: str, quantity: int = 1, rules: GameRules = DEFAULT_RULES) -> None:
    """
    Move items from the stash back into inventory.

    Raises:
        MissingStash, NotAtCamp, InsufficientMaterials, InventoryFull
    """
    _require_stash(player)
    held = player.stash.get(item_id, 0)
    if quantity <= 0 or held < quantity:
        raise InsufficientMaterials(f"Not enough {item_id} in stash (need {quantity}, have {held})")
    player.add_item(item_id, quantity, slots=rules.inventory_slots)
    player.unstash_item(item_id, quantity)
