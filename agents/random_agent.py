"""
Random agent implementation for testing and baseline comparison.
"""

import random
from typing import Any, List, Optional

from engine.core.actions import Action
from engine.core.types import ActionType
from engine.core.validation import allowed_actions
from engine.world.world import WorldState
from .base_agent import BaseAgent
from .registry import register_agent


@register_agent("random")
class RandomAgent(BaseAgent):
    """
    Agent that queues random legal intents.

    Decision process:
    - Sample uniformly from the currently allowed actions.
    - Repeat while energy remains, up to ``max_actions`` intents per tick.
    - Optionally skip the tick with ``idle_probability``.
    """

    def __init__(
        self,
        player_id: str,
        name: str = None,
        max_actions: int = 2,
        idle_probability: float = 0.0,
        seed: Optional[int] = None,
        **_: Any,
    ):
        """
        Initialize random agent.

        Args:
            player_id: Player to control
            name: Agent name (default: "RandomAgent")
            max_actions: Upper bound on intents queued per tick
            idle_probability: Chance of queueing nothing this tick
            seed: Random seed for reproducibility (None = random)
        """
        super().__init__(player_id, name)
        self.max_actions = max_actions
        self.idle_probability = idle_probability
        self.rng = random.Random(seed)

    def get_intents(self, world: WorldState) -> List[Action]:
        player = world.get_player(self.player_id)
        if player is None or not player.is_alive or not world.is_active:
            return []
        if self.idle_probability and self.rng.random() < self.idle_probability:
            return []

        intents: List[Action] = []
        queued = 0
        moved = False
        for _ in range(self.max_actions):
            allowed = allowed_actions(world, player, queued_energy_cost=queued)
            if moved:
                allowed = [a for a in allowed if a.type != ActionType.MOVE]
            if not allowed:
                break
            choice = self.rng.choice(allowed)
            intents.append(choice)
            queued += choice.energy_cost
            moved = moved or choice.type == ActionType.MOVE
        return intents
