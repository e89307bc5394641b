import pytest

from agents import AgentSpec, RandomAgent, available_agents, create_agent_from_spec, resolve_agent_class
from engine.core.types import ActionType, GameStatus
from engine.core.validation import validate_action


def test_random_agent_intents_are_legal_together(world):
    agent = RandomAgent("p1", seed=5, max_actions=3)
    player = world.get_player("p1")

    for _ in range(20):
        intents = agent.get_intents(world)
        assert 1 <= len(intents) <= 3
        assert sum(1 for a in intents if a.type == ActionType.MOVE) <= 1

        queued = 0
        for intent in intents:
            assert validate_action(world, player, intent.type, intent.params, queued).valid
            queued += intent.energy_cost
        assert queued <= player.energy


def test_random_agent_is_reproducible(world):
    first = [str(a) for a in RandomAgent("p1", seed=9).get_intents(world)]
    second = [str(a) for a in RandomAgent("p1", seed=9).get_intents(world)]
    assert first == second


def test_random_agent_idles_when_it_cannot_act(world):
    assert RandomAgent("p1", idle_probability=1.0, seed=1).get_intents(world) == []
    assert RandomAgent("ghost").get_intents(world) == []

    world.get_player("p2").is_alive = False
    assert RandomAgent("p2").get_intents(world) == []

    world.status = GameStatus.FINISHED
    assert RandomAgent("p1").get_intents(world) == []


def test_agent_spec_round_trip():
    spec = AgentSpec(type="random", player_id="p1", name="Vega", init_params={"seed": 3})
    assert AgentSpec.from_dict(spec.to_dict()) == spec
    assert spec.with_player("p2").player_id == "p2"
    with pytest.raises(ValueError):
        AgentSpec.from_dict({"type": "random"})


def test_factory_builds_registered_agents():
    agent = create_agent_from_spec(AgentSpec(type="random", player_id="p1", name="Vega", init_params={"seed": 3}))
    assert isinstance(agent, RandomAgent)
    assert agent.name == "Vega"
    assert str(agent) == "Vega (p1)"

    default = create_agent_from_spec(AgentSpec(type="agents.random_agent.RandomAgent", player_id="p2"))
    assert default.name == "RandomAgent"


def test_unknown_agent_types():
    with pytest.raises(ValueError):
        resolve_agent_class("genius")
    with pytest.raises(TypeError):
        resolve_agent_class("engine.core.rules.GameRules")


def test_available_agents_lists_registered_kinds():
    assert "random" in available_agents()
