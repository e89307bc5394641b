from engine.world.fog import player_vision, scanner_bonus, visible_hexes, visible_players
from engine.world.hexgrid import ORIGIN, spiral

from helpers import build_world, make_player


def test_base_vision_is_one_ring():
    seen = visible_hexes(ORIGIN, 0, [], spiral(ORIGIN, 3))
    assert len(seen) == 7


def test_scanner_bonus_widens_vision():
    seen = visible_hexes(ORIGIN, 1, [], spiral(ORIGIN, 3))
    assert len(seen) == 19


def test_allies_share_vision():
    seen = visible_hexes(ORIGIN, 0, [(3, 0)], spiral(ORIGIN, 4))
    assert (3, 0) in seen
    assert (4, 0) in seen
    assert (2, 0) in seen
    assert (-2, 0) not in seen


def test_scanner_array_only_counts_at_camp():
    player = make_player("p1", structures=["lean_to", "scanner_array"])
    assert scanner_bonus(player) == 1
    player.position = (1, 0)
    assert scanner_bonus(player) == 0


def test_faction_members_share_vision():
    world = build_world([make_player("p1", (1, 0)), make_player("p2", (-1, 1))])
    alone = {h.coord for h in player_vision(world, "p1")}
    assert (-1, 1) not in alone

    faction = world.factions.create_faction("Scavengers", "p1")
    invite = world.factions.invite(faction.id, "p2", "p1")
    world.factions.accept_invite(invite.id, "p2")

    shared = {h.coord for h in player_vision(world, "p1")}
    assert (-1, 1) in shared
    assert [p.id for p in visible_players(world, "p1")] == ["p2"]

    world.get_player("p2").is_alive = False
    assert (-1, 1) not in {h.coord for h in player_vision(world, "p1")}


def test_unplaced_player_sees_nothing():
    world = build_world([make_player("p1", None)])
    assert player_vision(world, "p1") == []
