"""
Base agent interface for Meridian bots.

Bots stand in for human players in simulations: each tick they look at the
world and return the intents their player would submit.
"""

from abc import ABC, abstractmethod
from typing import List

from engine.core.actions import Action
from engine.world.world import WorldState


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Subclasses must implement:
    - get_intents(): Produce this tick's intents for the controlled player

    Attributes:
        player_id: The player this agent controls
        name: Agent name for logging/identification
    """

    def __init__(self, player_id: str, name: str = None):
        self.player_id = player_id
        self.name = name or self.__class__.__name__

    @abstractmethod
    def get_intents(self, world: WorldState) -> List[Action]:
        """
        Get the intents to queue for the current tick.

        The returned actions are submitted through the session, which
        validates each one against the energy already queued; rejected
        intents are dropped. An empty list means the player idles.

        Args:
            world: Current world state (read-only)

        Returns:
            Actions stamped with ``world.tick_number``
        """
        pass

    def reset(self) -> None:
        """Reset agent state between games. Override if the agent keeps memory."""
        pass

    def __str__(self) -> str:
        return f"{self.name} ({self.player_id})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(player_id='{self.player_id}', name='{self.name}')"
