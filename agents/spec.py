from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class AgentSpec:
    """
    Serializable description of a bot seat.

    Intended for simulation configs so that agents can be instantiated
    dynamically by the factory/registry.
    """
    type: str
    player_id: str
    name: Optional[str] = None
    init_params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return {
            "type": self.type,
            "player_id": self.player_id,
            "name": self.name,
            "init_params": self.init_params,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentSpec":
        """Construct from a dict (e.g., loaded from JSON)."""
        player_id = data.get("player_id")
        if player_id is None:
            raise ValueError("AgentSpec requires 'player_id'")
        return cls(
            type=data["type"],
            player_id=player_id,
            name=data.get("name"),
            init_params=data.get("init_params", {}) or {},
        )

    def with_player(self, player_id: str) -> "AgentSpec":
        """Return a copy bound to another player."""
        return AgentSpec(
            type=self.type,
            player_id=player_id,
            name=self.name,
            init_params=dict(self.init_params),
        )
