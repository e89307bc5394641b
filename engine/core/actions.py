"""
Action definitions and utilities.

Actions represent intents queued by players for a tick. This module provides:
- Action dataclass
- Action factory methods
- Action serialization
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import json
import uuid

from .types import ActionType, HexCoord
from .catalog import action_cost


def _new_action_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Action:
    """
    An intent queued by a player for one tick.

    The resolver consumes each action at most once: actions already
    flagged ``resolved`` or stamped with another tick number are ignored.

    Use static factory methods for convenient construction:
        - Action.move(player_id, (q, r))
        - Action.gather(player_id)
        - Action.build(player_id, "lean_to")
        - Action.craft(player_id, "crystal_blade")

    Or construct directly:
        - Action(ActionType.SLEEP, "p1")
        - Action(ActionType.MOVE, "p1", {"target_q": 1, "target_r": 0})
    """

    type: ActionType
    player_id: str
    params: Dict[str, Any] = field(default_factory=dict)
    tick_number: int = 0
    energy_cost: Optional[int] = None
    id: str = field(default_factory=_new_action_id)
    resolved: bool = False

    def __post_init__(self):
        if not isinstance(self.type, ActionType):
            self.type = ActionType(self.type)
        if self.energy_cost is None:
            self.energy_cost = action_cost(self.type)

    @property
    def target(self) -> Optional[HexCoord]:
        """Move destination, or None when the params do not name one."""
        q = self.params.get("target_q")
        r = self.params.get("target_r")
        if isinstance(q, bool) or isinstance(r, bool):
            return None
        if not isinstance(q, int) or not isinstance(r, int):
            return None
        return (q, r)

    @property
    def structure_id(self) -> Optional[str]:
        return self.params.get("structure_id") or self.params.get("structure")

    @property
    def item_id(self) -> Optional[str]:
        return self.params.get("item_id") or self.params.get("item")

    @property
    def quantity(self) -> int:
        return int(self.params.get("quantity", 1))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "player_id": self.player_id,
            "params": dict(self.params),
            "tick_number": self.tick_number,
            "energy_cost": self.energy_cost,
            "resolved": self.resolved,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Action:
        """
        Create an action from a dictionary.

        Raises:
            ValueError: If the type is missing or unknown
        """
        if "type" not in data:
            raise ValueError("Action dictionary must contain 'type'")

        return cls(
            type=ActionType(data["type"]),
            player_id=data["player_id"],
            params=dict(data.get("params", {})),
            tick_number=data.get("tick_number", 0),
            energy_cost=data.get("energy_cost"),
            id=data.get("id") or _new_action_id(),
            resolved=data.get("resolved", False),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> Action:
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        if self.type == ActionType.MOVE:
            return f"MOVE {self.target}"
        if self.type == ActionType.BUILD:
            return f"BUILD {self.structure_id}"
        if self.type in (ActionType.CRAFT, ActionType.DEPOSIT, ActionType.WITHDRAW):
            return f"{self.type.name} {self.item_id}"
        return self.type.name

    # FACTORY METHODS
    @staticmethod
    def move(player_id: str, target: HexCoord, tick_number: int = 0) -> Action:
        """Move to the adjacent hex ``target``."""
        q, r = target
        return Action(ActionType.MOVE, player_id, {"target_q": q, "target_r": r}, tick_number)

    @staticmethod
    def gather(player_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.GATHER, player_id, {}, tick_number)

    @staticmethod
    def explore(player_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.EXPLORE, player_id, {}, tick_number)

    @staticmethod
    def build(player_id: str, structure_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.BUILD, player_id, {"structure_id": structure_id}, tick_number)

    @staticmethod
    def craft(player_id: str, item_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.CRAFT, player_id, {"item_id": item_id}, tick_number)

    @staticmethod
    def sleep(player_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.SLEEP, player_id, {}, tick_number)

    @staticmethod
    def attack(player_id: str, tick_number: int = 0) -> Action:
        """Attack whoever else stands on the same hex."""
        return Action(ActionType.ATTACK, player_id, {}, tick_number)

    @staticmethod
    def hide(player_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.HIDE, player_id, {}, tick_number)

    @staticmethod
    def install_part(player_id: str, tick_number: int = 0) -> Action:
        return Action(ActionType.INSTALL_PART, player_id, {}, tick_number)

    @staticmethod
    def deposit(player_id: str, item_id: str, quantity: int = 1, tick_number: int = 0) -> Action:
        return Action(ActionType.DEPOSIT, player_id, {"item_id": item_id, "quantity": quantity}, tick_number)

    @staticmethod
    def withdraw(player_id: str, item_id: str, quantity: int = 1, tick_number: int = 0) -> Action:
        return Action(ActionType.WITHDRAW, player_id, {"item_id": item_id, "quantity": quantity}, tick_number)
