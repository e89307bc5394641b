"""
Per-player tick reports.

The TickLedger collects what happened to each player while the phases
run; at the end of the tick it is turned into one TickReport per player.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..core.types import ReportType

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass
class TickReport:
    """
    What one player experienced during one tick (or their epilogue).

    Attributes:
        game_id: Game the report belongs to
        player_id: Recipient
        tick_number: Tick that was resolved
        report_type: "tick" or "epilogue"
        narrative: Joined narrative text, None if nothing happened
        outcomes: Resources gained during the tick
        health_delta: Health after minus health before
        energy_delta: Energy after minus energy before
    """
    game_id: str
    player_id: str
    tick_number: int
    report_type: ReportType = ReportType.TICK
    narrative: Optional[str] = None
    outcomes: Dict[str, int] = field(default_factory=dict)
    health_delta: int = 0
    energy_delta: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "player_id": self.player_id,
            "tick_number": self.tick_number,
            "report_type": self.report_type.value,
            "narrative": self.narrative,
            "outcomes": dict(self.outcomes),
            "health_delta": self.health_delta,
            "energy_delta": self.energy_delta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TickReport":
        return cls(
            game_id=data["game_id"],
            player_id=data["player_id"],
            tick_number=data["tick_number"],
            report_type=ReportType(data.get("report_type", "tick")),
            narrative=data.get("narrative"),
            outcomes=dict(data.get("outcomes", {})),
            health_delta=data.get("health_delta", 0),
            energy_delta=data.get("energy_delta", 0),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


class TickLedger:
    """Mutable scratchpad shared by the phases of one tick."""

    def __init__(self, world: WorldState):
        self._start = {p.id: (p.health, p.energy) for p in world.players}
        self._lines: Dict[str, List[str]] = {p.id: [] for p in world.players}
        self._outcomes: Dict[str, Dict[str, int]] = {p.id: {} for p in world.players}

    def note(self, player_id: str, text: str) -> None:
        if text:
            self._lines.setdefault(player_id, []).append(text)

    def add_outcomes(self, player_id: str, outcomes: Mapping[str, int]) -> None:
        totals = self._outcomes.setdefault(player_id, {})
        for resource, amount in outcomes.items():
            totals[resource] = totals.get(resource, 0) + amount

    def lines(self, player_id: str) -> List[str]:
        return list(self._lines.get(player_id, []))

    def outcomes(self, player_id: str) -> Dict[str, int]:
        return dict(self._outcomes.get(player_id, {}))

    def build_reports(self, world: WorldState, tick_number: int) -> List[TickReport]:
        reports: List[TickReport] = []
        for player in world.players:
            health_before, energy_before = self._start.get(player.id, (player.health, player.energy))
            lines = self._lines.get(player.id, [])
            reports.append(TickReport(
                game_id=world.game_id,
                player_id=player.id,
                tick_number=tick_number,
                report_type=ReportType.TICK,
                narrative="\n\n".join(lines) if lines else None,
                outcomes=self.outcomes(player.id),
                health_delta=player.health - health_before,
                energy_delta=player.energy - energy_before,
            ))
        return reports
