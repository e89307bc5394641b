import pytest

from engine.core.rules import DEFAULT_RULES
from engine.core.types import Biome
from engine.mechanics.escalation import apply_mutations, escalate, mutate_biome, weather_damage
from engine.mechanics.survival import resolve_recovery, resolve_survival, resolve_weather

from helpers import StubRng, build_world, make_player


def test_fed_players_eat_one_ration(world):
    damage = resolve_survival(world)
    assert damage == {"p1": 0, "p2": 0}
    assert world.get_player("p1").quantity("rations") == 4


def test_starvation_costs_health():
    world = build_world([make_player("p1", inventory={})])
    assert resolve_survival(world) == {"p1": DEFAULT_RULES.starvation_damage}
    assert world.get_player("p1").health == 85


def test_starvation_can_kill():
    world = build_world([make_player("p1", inventory={}, health=10)])
    resolve_survival(world)
    player = world.get_player("p1")
    assert player.health == 0
    assert not player.is_alive


@pytest.mark.parametrize(
    "hostility, sheltered, expected",
    [(0.0, False, 0), (0.8, True, 4), (0.8, False, 12), (1.0, False, 15), (0.1, True, 0)],
)
def test_weather_damage(hostility, sheltered, expected):
    assert weather_damage(hostility, sheltered) == expected


def test_weather_uses_shelter():
    world = build_world([make_player("p1"), make_player("p2", (1, 0), camp=(0, 0))])
    assert resolve_weather(world, 0.8) == {"p1": 4, "p2": 12}
    assert world.get_player("p2").health == 88


def test_recovery_amounts():
    world = build_world([
        make_player("sheltered"),
        make_player("exposed", (1, 0), camp=None, structures=[]),
        make_player("rested", buffs={"rested": True}),
        make_player("full", energy=8),
    ])
    gained = resolve_recovery(world)
    assert gained == {"sheltered": 3, "exposed": 2, "rested": 4, "full": 1}
    assert world.get_player("full").energy == DEFAULT_RULES.max_energy
    assert not world.get_player("rested").is_rested


def test_escalation_steps_to_one():
    hostility = 0.0
    for _ in range(DEFAULT_RULES.total_ticks + 3):
        hostility = escalate(hostility)
    assert hostility == 1.0
    assert escalate(0.0) == pytest.approx(1 / 28)


def test_mutate_biome_follows_table():
    assert mutate_biome(Biome.FLATS, StubRng()) == Biome.FUNGAL_MARSH
    assert mutate_biome(Biome.CHASM, StubRng()) == Biome.CHASM


def test_mutations_skip_stable_biomes_and_hull():
    world = build_world(rng=StubRng(default=0.0), hostility=1.0)
    mutations = apply_mutations(world)

    assert len(mutations) == 7
    assert world.get_hex((0, 0)).biome == Biome.SCAR
    assert world.get_hex((2, -1)).biome == Biome.CHASM
    assert world.get_hex((1, 0)).biome == Biome.FUNGAL_MARSH
    assert world.get_hex((1, -1)).biome == Biome.SCAR


def test_no_mutations_without_hostility():
    world = build_world(rng=StubRng(default=0.0), hostility=0.0)
    assert apply_mutations(world) == []
