import pytest

from engine.core.errors import (
    InsufficientMaterials,
    InventoryFull,
    MaxStructuresReached,
    MissingStash,
    MissingWorkbench,
    NotAtCamp,
    UnknownStructure,
)
from engine.core.rules import DEFAULT_RULES
from engine.core.types import EquipmentSlot
from engine.mechanics.economy import deposit, resolve_build, resolve_craft, withdraw

from helpers import make_player


def test_first_build_founds_camp():
    player = make_player("p1", (1, 0), camp=None, structures=[], inventory={"salvage": 5})
    resolve_build(player, "lean_to")

    assert player.camp == (1, 0)
    assert player.structures == ["lean_to"]
    assert player.inventory == {"salvage": 2}


def test_build_keeps_existing_camp():
    player = make_player("p1", inventory={"salvage": 4})
    player.position = (1, 0)
    resolve_build(player, "stash")
    assert player.camp == (0, 0)


def test_build_failures_leave_player_untouched():
    player = make_player("p1", inventory={"salvage": 2})
    with pytest.raises(InsufficientMaterials):
        resolve_build(player, "lean_to")
    with pytest.raises(UnknownStructure):
        resolve_build(player, "tower")
    assert player.inventory == {"salvage": 2}
    assert player.structures == ["lean_to"]


def test_structure_cap():
    player = make_player("p1", inventory={"salvage": 30}, structures=["lean_to"] * DEFAULT_RULES.max_structures)
    with pytest.raises(MaxStructuresReached):
        resolve_build(player, "lean_to")
    assert player.quantity("salvage") == 30


def test_craft_equips_into_free_slot():
    player = make_player("p1", inventory={"salvage": 6, "energy_cells": 2}, structures=["workbench"])
    resolve_craft(player, "crystal_blade")
    resolve_craft(player, "crystal_blade")

    assert player.quantity("crystal_blade") == 2
    assert player.equipped(EquipmentSlot.WEAPON) == "crystal_blade"
    assert "salvage" not in player.inventory
    assert "energy_cells" not in player.inventory


def test_craft_does_not_replace_equipped_item():
    player = make_player(
        "p1",
        inventory={"biostock": 6, "salvage": 2, "spore_suit": 1},
        structures=["workbench"],
        equipment={EquipmentSlot.SUIT: "spore_suit"},
    )
    resolve_craft(player, "chitin_shield")
    assert player.equipped(EquipmentSlot.SUIT) == "spore_suit"
    assert player.quantity("chitin_shield") == 1


def test_craft_requires_workbench():
    player = make_player("p1", inventory={"salvage": 2})
    with pytest.raises(MissingWorkbench):
        resolve_craft(player, "makeshift_knife")


def test_craft_uses_slot_freed_by_materials():
    inventory = {"salvage": 2, "a": 1, "b": 1, "c": 1, "d": 1, "e": 1}
    player = make_player("p1", inventory=dict(inventory), structures=["workbench"])
    resolve_craft(player, "makeshift_knife")
    assert player.quantity("makeshift_knife") == 1
    assert "salvage" not in player.inventory


def test_craft_with_full_inventory_fails_cleanly():
    inventory = {"salvage": 3, "a": 1, "b": 1, "c": 1, "d": 1, "e": 1}
    player = make_player("p1", inventory=dict(inventory), structures=["workbench"])
    with pytest.raises(InventoryFull):
        resolve_craft(player, "makeshift_knife")
    assert player.inventory == inventory


def test_deposit_and_withdraw():
    player = make_player("p1", structures=["lean_to", "stash"])
    deposit(player, "rations", 3)
    assert player.quantity("rations") == 2
    assert player.stash == {"rations": 3}

    withdraw(player, "rations", 3)
    assert player.quantity("rations") == 5
    assert player.stash == {}


def test_stash_requires_structure_and_camp():
    player = make_player("p1")
    with pytest.raises(MissingStash):
        deposit(player, "rations", 1)

    player.structures.append("stash")
    player.position = (1, 0)
    with pytest.raises(NotAtCamp):
        withdraw(player, "rations", 1)


def test_deposit_more_than_held():
    player = make_player("p1", structures=["stash"])
    with pytest.raises(InsufficientMaterials):
        deposit(player, "rations", 6)
    assert player.quantity("rations") == 5


def test_depositing_equipped_item_unequips_it():
    player = make_player(
        "p1",
        inventory={"crystal_blade": 1},
        structures=["stash"],
        equipment={EquipmentSlot.WEAPON: "crystal_blade"},
    )
    deposit(player, "crystal_blade", 1)
    assert player.equipped(EquipmentSlot.WEAPON) is None
