from __future__ import annotations

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec


def create_agent_from_spec(spec: AgentSpec) -> BaseAgent:
    """Instantiate an agent from an AgentSpec."""
    cls = resolve_agent_class(spec.type)

    init_kwargs = dict(spec.init_params)
    init_kwargs.setdefault("player_id", spec.player_id)
    if spec.name is not None:
        init_kwargs.setdefault("name", spec.name)

    agent = cls(**init_kwargs)
    if not isinstance(agent, BaseAgent):
        raise TypeError(f"Agent {cls} is not a BaseAgent")
    return agent
