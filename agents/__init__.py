"""
Bots that play Meridian through the same intent interface as humans.

This module provides:
- BaseAgent: Abstract interface for all agents
- RandomAgent: Random legal intents, for simulations and smoke tests
- AgentSpec / create_agent_from_spec: Config-driven construction
"""

from .base_agent import BaseAgent
from .registry import AGENT_REGISTRY, available_agents, register_agent, resolve_agent_class
from .random_agent import RandomAgent
from .spec import AgentSpec
from .factory import create_agent_from_spec

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "AGENT_REGISTRY",
    "available_agents",
    "register_agent",
    "resolve_agent_class",
    "AgentSpec",
    "create_agent_from_spec",
]
