"""
Shared action validation helpers.

The session uses these to gate submissions and bots use ``allowed_actions``
to ask "what can I do?". The tick resolver never trusts them: it re-derives
legality against the state it is resolving.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from .types import ActionValidation, ActionType
from .actions import Action
from .catalog import (
    ACTIONS,
    ITEMS,
    STASH,
    STRUCTURES,
    WORKBENCH,
    get_item,
    get_structure,
    is_passable,
)
from .errors import InvalidAction
from ..world.hexgrid import hex_distance, neighbors

if TYPE_CHECKING:
    from ..world.world import WorldState
    from ..world.player import Player


def validate_action(
    world: WorldState,
    player: Player,
    action_type: ActionType | str,
    params: Optional[Mapping[str, Any]] = None,
    queued_energy_cost: int = 0,
) -> ActionValidation:
    """
    Decide whether ``player`` may queue an intent.

    Args:
        world: Current world state (hexes are needed for move checks)
        player: Submitting player
        action_type: Requested action (enum or raw string)
        params: Action parameters
        queued_energy_cost: Sum of the player's unresolved queued costs

    Returns:
        ActionValidation carrying the intended energy cost even on failure
    """
    params = params or {}
    parsed = ActionType.parse(action_type)
    if parsed is None:
        return ActionValidation.fail("UNKNOWN_ACTION", f"Unknown action type: {action_type}")

    cost = ACTIONS[parsed].energy_cost

    if not player.is_alive:
        return ActionValidation.fail("PLAYER_DEAD", "Player must be alive to perform actions", cost)

    total = queued_energy_cost + cost
    if total > player.energy:
        return ActionValidation.fail(
            "INSUFFICIENT_ENERGY",
            f"Not enough energy (need {total}, have {player.energy})",
            cost,
        )

    if parsed == ActionType.MOVE:
        return _validate_move(world, player, params, cost)
    if parsed == ActionType.BUILD:
        return _validate_build(player, params, cost)
    if parsed == ActionType.CRAFT:
        return _validate_craft(player, params, cost)
    if parsed in (ActionType.DEPOSIT, ActionType.WITHDRAW):
        return _validate_stash(player, params, cost)

    return ActionValidation.success(cost)


def _validate_move(world: WorldState, player: Player, params: Mapping[str, Any], cost: int) -> ActionValidation:
    target = Action(ActionType.MOVE, player.id, dict(params)).target
    if target is None:
        return ActionValidation.fail("MISSING_PARAMS", "Move requires target_q and target_r", cost)

    if player.position is None:
        return ActionValidation.fail("NO_POSITION", "Player has not been placed on the map", cost)

    if hex_distance(player.position, target) != 1:
        return ActionValidation.fail("NOT_ADJACENT", "Target hex must be adjacent to current position", cost)

    hex_ = world.get_hex(target)
    if hex_ is None:
        return ActionValidation.fail("NO_SUCH_HEX", "Target hex does not exist", cost)

    if not is_passable(hex_.biome):
        return ActionValidation.fail("IMPASSABLE", "Target hex is impassable", cost)

    return ActionValidation.success(cost)


def _missing_materials(player: Player, costs: Mapping[str, int]) -> Optional[str]:
    for resource, amount in costs.items():
        if player.quantity(resource) < amount:
            return f"Not enough {resource} (need {amount}, have {player.quantity(resource)})"
    return None


def _validate_build(player: Player, params: Mapping[str, Any], cost: int) -> ActionValidation:
    structure_id = params.get("structure_id") or params.get("structure")
    if not structure_id:
        return ActionValidation.fail("MISSING_PARAMS", "Build requires a structure_id param", cost)

    structure = get_structure(structure_id)
    if structure is None:
        return ActionValidation.fail("UNKNOWN_STRUCTURE", f"Unknown structure: {structure_id}", cost)

    missing = _missing_materials(player, structure.cost)
    if missing:
        return ActionValidation.fail("INSUFFICIENT_MATERIALS", missing, cost)

    return ActionValidation.success(cost)


def _validate_craft(player: Player, params: Mapping[str, Any], cost: int) -> ActionValidation:
    item_id = params.get("item_id") or params.get("item")
    if not item_id:
        return ActionValidation.fail("MISSING_PARAMS", "Craft requires an item_id param", cost)

    if get_item(item_id) is None:
        return ActionValidation.fail("UNKNOWN_ITEM", f"Unknown item: {item_id}", cost)

    if WORKBENCH not in player.structures:
        return ActionValidation.fail("MISSING_WORKBENCH", "Crafting requires a workbench at your camp", cost)

    return ActionValidation.success(cost)


def _validate_stash(player: Player, params: Mapping[str, Any], cost: int) -> ActionValidation:
    item_id = params.get("item_id") or params.get("item")
    if not item_id:
        return ActionValidation.fail("MISSING_PARAMS", "Stash access requires an item_id param", cost)

    if STASH not in player.structures:
        return ActionValidation.fail("MISSING_STASH", "You have not built a stash", cost)

    if not player.at_camp:
        return ActionValidation.fail("NOT_AT_CAMP", "You must be at your camp to use the stash", cost)

    return ActionValidation.success(cost)


def require_valid(
    world: WorldState,
    player: Player,
    action_type: ActionType | str,
    params: Optional[Mapping[str, Any]] = None,
    queued_energy_cost: int = 0,
) -> ActionValidation:
    """Like validate_action, but raises InvalidAction on rejection."""
    validation = validate_action(world, player, action_type, params, queued_energy_cost)
    if not validation.valid:
        raise InvalidAction(validation)
    return validation


def allowed_actions(world: WorldState, player: Player, queued_energy_cost: int = 0) -> List[Action]:
    """
    Enumerate every intent that would currently pass validation.

    Attack is listed whenever it is affordable; whether a target shares the
    hex is only known at resolution time.
    """
    candidates: List[Dict[str, Any]] = []

    if player.position is not None:
        for coord in neighbors(player.position):
            candidates.append({"type": ActionType.MOVE, "params": {"target_q": coord[0], "target_r": coord[1]}})

    for action_type in (ActionType.GATHER, ActionType.EXPLORE, ActionType.SLEEP,
                        ActionType.ATTACK, ActionType.HIDE, ActionType.INSTALL_PART):
        candidates.append({"type": action_type, "params": {}})

    for structure_id in STRUCTURES:
        candidates.append({"type": ActionType.BUILD, "params": {"structure_id": structure_id}})

    if WORKBENCH in player.structures:
        for item_id in _craftable(player):
            candidates.append({"type": ActionType.CRAFT, "params": {"item_id": item_id}})

    for item_id, quantity in player.inventory.items():
        candidates.append({"type": ActionType.DEPOSIT, "params": {"item_id": item_id, "quantity": quantity}})
    for item_id, quantity in player.stash.items():
        candidates.append({"type": ActionType.WITHDRAW, "params": {"item_id": item_id, "quantity": quantity}})

    allowed: List[Action] = []
    for candidate in candidates:
        validation = validate_action(world, player, candidate["type"], candidate["params"], queued_energy_cost)
        if validation.valid:
            allowed.append(Action(
                candidate["type"],
                player.id,
                candidate["params"],
                tick_number=world.tick_number,
                energy_cost=validation.energy_cost,
            ))
    return allowed


def _craftable(player: Player) -> List[str]:
    return [item_id for item_id, item in ITEMS.items() if _missing_materials(player, item.materials) is None]
