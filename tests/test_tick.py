import pytest

from engine.core.actions import Action
from engine.core.rules import DEFAULT_RULES
from engine.core.types import Biome, GameStatus, ReportType
from engine.mechanics.launch import trigger_launch
from engine.mechanics.outcomes import HexEvent, OutcomeProvider
from engine.tick import TickResolver

from helpers import StubRng, build_world, make_player


class RecordingProvider(OutcomeProvider):
    name = "recording"

    def __init__(self, event):
        self.event = event
        self.contexts = []
        self.epilogues = []

    async def generate_hex_event(self, context):
        self.contexts.append(context)
        return self.event

    async def generate_epilogue(self, context):
        self.epilogues.append(context)
        return f"{context.player_name} {'escaped' if context.escaped else 'stayed'}."


def test_input_world_is_left_untouched(world):
    actions = [Action.gather("p1", tick_number=1)]
    result = TickResolver().resolve(world, actions)

    assert world.tick_number == 1
    assert world.get_player("p1").quantity("rations") == 5
    assert actions[0].resolved is False

    assert result.world is not world
    assert result.world.tick_number == 2
    assert all(a.resolved for a in result.resolved_actions)


def test_move_resolves_before_gather():
    world = build_world([make_player("p1")], rng=StubRng())
    actions = [Action.move("p1", (1, 0), tick_number=1), Action.gather("p1", tick_number=1)]
    result = TickResolver().resolve(world, actions)

    player = result.world.get_player("p1")
    assert player.position == (1, 0)
    assert player.quantity("rations") == 5
    assert player.energy == 3
    assert result.world.get_hex((1, 0)).history_summaries() == ["You scavenge the Flats, finding what you can."]

    report = result.report_for("p1")
    assert report.outcomes == {"rations": 1}
    assert report.energy_delta == 0
    assert "Flats" in report.narrative


def test_stale_and_resolved_actions_are_ignored(world):
    stale = Action.move("p1", (1, 0), tick_number=0)
    done = Action.move("p2", (1, 0), tick_number=1)
    done.resolved = True
    result = TickResolver().resolve(world, [stale, done])

    assert result.world.get_player("p1").position == (0, 0)
    assert result.world.get_player("p2").position == (0, 0)
    assert result.resolved_actions == []


def test_combat_happens_after_movement():
    world = build_world([make_player("p1"), make_player("p2", (1, 0))], rng=StubRng())
    actions = [Action.attack("p1", tick_number=1), Action.move("p2", (0, 0), tick_number=1)]
    result = TickResolver().resolve(world, actions)

    assert result.combat[0].defender_id == "p2"
    assert result.report_for("p2").health_delta == -15
    assert "attacked you" in result.report_for("p2").narrative


def test_forfeited_action_still_costs_energy(world):
    result = TickResolver().resolve(world, [Action.build("p1", "workbench", tick_number=1)])
    report = result.report_for("p1")
    assert "Build failed" in report.narrative
    assert result.world.get_player("p1").energy == 3 - 1 + 3


def test_starvation_death_and_respawn_in_one_tick():
    world = build_world([make_player("p1"), make_player("p2", inventory={}, health=10)])
    result = TickResolver().resolve(world, [])

    p2 = result.world.get_player("p2")
    assert p2.is_alive
    assert p2.health == DEFAULT_RULES.max_health
    assert p2.position != (0, 0)
    assert result.deaths[0].player_id == "p2"
    assert "You died" in result.report_for("p2").narrative


def test_hostility_escalates_each_tick(world):
    result = TickResolver().resolve(world, [])
    assert result.world.hostility == pytest.approx(1 / DEFAULT_RULES.total_ticks)
    assert [r.report_type for r in result.reports] == [ReportType.TICK, ReportType.TICK]


def test_mutation_rolls_use_hostility_at_tick_start():
    world = build_world([make_player("p1")], rng=StubRng(default=0.0), hostility=0.0)
    result = TickResolver().resolve(world, [])

    assert result.mutations == []
    assert result.world.hostility > 0.0

    again = TickResolver().resolve(result.world, [])
    assert again.mutations


def test_move_into_hex_that_became_impassable_is_forfeited(world):
    actions = [Action.move("p1", (1, 0), tick_number=1)]
    world.get_hex((1, 0)).biome = Biome.CHASM
    result = TickResolver().resolve(world, actions)

    movement = result.movements[0]
    assert not movement.success
    assert movement.failure_reason == "IMPASSABLE"
    player = result.world.get_player("p1")
    assert player.position == (0, 0)
    assert player.energy == 3 - 1 + 3
    assert result.world.tick_number == 2


def test_provider_output_is_clamped_and_recorded(world):
    provider = RecordingProvider(HexEvent("The scar glitters with wreckage.", {"salvage": 40, "gold": 2}))
    result = TickResolver().resolve(world, [Action.explore("p1", tick_number=1)], provider)

    assert provider.contexts[0].biome.value == "scar"
    assert provider.contexts[0].action == "explore"
    player = result.world.get_player("p1")
    assert player.quantity("salvage") == 8
    assert player.discoveries == ["The Scar (0,0)"]
    assert result.world.get_hex((0, 0)).history_summaries() == ["The scar glitters with wreckage."]


def test_explore_finds_ship_part():
    world = build_world([make_player("p1")], rng=StubRng())
    world.get_hex((0, 0)).ship_part = True
    result = TickResolver().resolve(world, [Action.explore("p1", tick_number=1)])

    assert result.world.get_player("p1").quantity("ship_parts") == 1
    assert result.world.get_hex((0, 0)).ship_part is False


def test_countdown_ends_with_epilogues():
    world = build_world([make_player("p1"), make_player("p2", (1, 0))])
    world.parts_installed = world.parts_required
    trigger_launch(world)
    world.launch_countdown = 1

    provider = RecordingProvider(HexEvent("unused", {}))
    result = TickResolver().resolve(world, [], provider)

    assert result.launch.launched
    assert result.world.status == GameStatus.FINISHED
    assert [e.narrative for e in result.epilogues] == ["Player p1 escaped.", "Player p2 stayed."]
    assert all(e.tick_number == 1 for e in result.epilogues)


def test_inactive_game_cannot_resolve(world):
    world.status = GameStatus.FINISHED
    with pytest.raises(RuntimeError):
        TickResolver().resolve(world, [])
