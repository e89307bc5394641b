"""
MovementResolver - Movement phase.

This module handles:
- Re-validating each queued move against this tick's hexes
- Applying position changes
- Spending energy whether or not the move succeeds
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from dataclasses import dataclass

from ..core.types import ActionType, HexCoord
from ..core.actions import Action
from ..world.hexgrid import hex_distance
from infra.logger import get_logger

if TYPE_CHECKING:
    from ..world.world import WorldState

log = get_logger(__name__)


@dataclass
class MovementResult:
    """
    Result of resolving a single move.

    Attributes:
        player_id: Player that moved (or tried to)
        success: Whether the move happened
        old_pos: Position before the move
        new_pos: Position after the move (same as old if failed)
        failure_reason: Machine-readable reason code when the move fails
    """
    player_id: str
    success: bool
    old_pos: Optional[HexCoord]
    new_pos: Optional[HexCoord]
    failure_reason: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "success": self.success,
            "old_pos": self.old_pos,
            "new_pos": self.new_pos,
            "failure_reason": self.failure_reason,
        }


def spend_energy(player, amount: int) -> None:
    player.energy = max(0, player.energy - amount)


class MovementResolver:
    """Stateless resolver for the movement phase."""

    def resolve(self, world: WorldState, actions: List[Action]) -> List[MovementResult]:
        """
        Apply every move in submission order.

        Failed moves are forfeited silently; their energy is spent anyway.
        Dead or unknown players are skipped without cost.
        """
        results: List[MovementResult] = []
        for action in actions:
            if action.type != ActionType.MOVE:
                continue
            player = world.get_player(action.player_id)
            if player is None or not player.is_alive:
                continue

            old_pos = player.position
            reason = self._check(world, old_pos, action.target)
            if reason is None:
                player.position = action.target
            else:
                log.debug("Move by %s to %s forfeited: %s", player.id, action.target, reason)

            spend_energy(player, action.energy_cost)
            results.append(MovementResult(
                player_id=player.id,
                success=reason is None,
                old_pos=old_pos,
                new_pos=player.position,
                failure_reason=reason,
            ))
        return results

    @staticmethod
    def _check(world: WorldState, origin: Optional[HexCoord], target: Optional[HexCoord]) -> Optional[str]:
        if target is None:
            return "MISSING_PARAMS"
        if origin is None:
            return "NO_POSITION"
        if hex_distance(origin, target) != 1:
            return "NOT_ADJACENT"
        hex_ = world.get_hex(target)
        if hex_ is None:
            return "NO_SUCH_HEX"
        if not hex_.passable:
            return "IMPASSABLE"
        return None
