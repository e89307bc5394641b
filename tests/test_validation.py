import pytest

from engine.core.errors import InvalidAction
from engine.core.types import ActionType
from engine.core.validation import allowed_actions, require_valid, validate_action

from helpers import build_world, make_player


def _move(q, r):
    return {"target_q": q, "target_r": r}


def test_move_to_adjacent_passable_hex(world):
    result = validate_action(world, world.get_player("p1"), "move", _move(1, 0))
    assert result.valid
    assert result.energy_cost == 1


@pytest.mark.parametrize(
    "position, target, code",
    [
        ((0, 0), (2, 0), "NOT_ADJACENT"),
        ((0, 0), (0, 0), "NOT_ADJACENT"),
        ((1, 0), (2, -1), "IMPASSABLE"),
        ((2, 0), (3, 0), "NO_SUCH_HEX"),
    ],
)
def test_move_rejections(position, target, code):
    world = build_world([make_player("p1", position)])
    result = validate_action(world, world.get_player("p1"), ActionType.MOVE, _move(*target))
    assert not result.valid
    assert result.error_code == code
    assert result.energy_cost == 1


def test_move_without_target(world):
    result = validate_action(world, world.get_player("p1"), "move", {"target_q": 1})
    assert result.error_code == "MISSING_PARAMS"


def test_unknown_action_costs_nothing(world):
    result = validate_action(world, world.get_player("p1"), "teleport")
    assert not result.valid
    assert result.error_code == "UNKNOWN_ACTION"
    assert result.energy_cost == 0


def test_dead_player_rejected(world):
    player = world.get_player("p1")
    player.is_alive = False
    result = validate_action(world, player, "gather")
    assert result.error_code == "PLAYER_DEAD"
    assert result.energy_cost == 1


def test_queued_energy_counts_against_budget(world):
    player = world.get_player("p1")
    assert validate_action(world, player, "attack", queued_energy_cost=1).valid
    result = validate_action(world, player, "attack", queued_energy_cost=2)
    assert result.error_code == "INSUFFICIENT_ENERGY"
    assert result.energy_cost == 2
    assert "need 4, have 3" in result.message


def test_sleep_is_free_even_when_exhausted(world):
    player = world.get_player("p1")
    player.energy = 0
    assert validate_action(world, player, "sleep").valid


def test_build_checks(world):
    player = world.get_player("p1")
    assert validate_action(world, player, "build", {}).error_code == "MISSING_PARAMS"
    assert validate_action(world, player, "build", {"structure_id": "castle"}).error_code == "UNKNOWN_STRUCTURE"
    assert validate_action(world, player, "build", {"structure_id": "lean_to"}).error_code == "INSUFFICIENT_MATERIALS"

    player.inventory["salvage"] = 3
    assert validate_action(world, player, "build", {"structure_id": "lean_to"}).valid


def test_craft_checks(world):
    player = world.get_player("p1")
    assert validate_action(world, player, "craft", {"item_id": "laser"}).error_code == "UNKNOWN_ITEM"
    assert validate_action(world, player, "craft", {"item_id": "makeshift_knife"}).error_code == "MISSING_WORKBENCH"

    player.structures.append("workbench")
    assert validate_action(world, player, "craft", {"item_id": "makeshift_knife"}).valid


def test_stash_access_checks(world):
    player = world.get_player("p1")
    params = {"item_id": "rations", "quantity": 1}
    assert validate_action(world, player, "deposit", params).error_code == "MISSING_STASH"

    player.structures.append("stash")
    assert validate_action(world, player, "deposit", params).valid

    player.position = (1, 0)
    assert validate_action(world, player, "withdraw", params).error_code == "NOT_AT_CAMP"


def test_require_valid_raises(world):
    with pytest.raises(InvalidAction) as excinfo:
        require_valid(world, world.get_player("p1"), "move", _move(2, 0))
    assert excinfo.value.error_code == "NOT_ADJACENT"
    assert excinfo.value.energy_cost == 1


def test_allowed_actions_all_validate(world):
    player = world.get_player("p1")
    player.inventory.update({"salvage": 3})
    allowed = allowed_actions(world, player)

    for action in allowed:
        assert validate_action(world, player, action.type, action.params).valid
        assert action.tick_number == world.tick_number

    moves = {a.target for a in allowed if a.type == ActionType.MOVE}
    assert moves == {(1, 0), (0, 1), (-1, 0), (-1, 1), (0, -1), (1, -1)}
    builds = {a.structure_id for a in allowed if a.type == ActionType.BUILD}
    assert builds == {"lean_to"}


def test_allowed_actions_respect_queued_energy(world):
    player = world.get_player("p1")
    allowed = allowed_actions(world, player, queued_energy_cost=3)
    assert {a.type for a in allowed} == {ActionType.SLEEP}
