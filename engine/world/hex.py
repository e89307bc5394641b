"""
Hex tiles and their rolling history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.types import Biome, HexCoord
from ..core.catalog import BiomeDef, get_biome, is_passable


@dataclass
class HexHistoryEntry:
    """One remembered event on a hex."""
    tick: int
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {"tick": self.tick, "summary": self.summary}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HexHistoryEntry":
        return cls(tick=data["tick"], summary=data["summary"])


@dataclass
class Hex:
    """
    A single map tile.

    Position never changes after generation. Biome mutates as the planet
    escalates; ``ruins_loot`` accumulates what dead players leave behind.
    """
    q: int
    r: int
    biome: Biome
    ship_part: bool = False
    history: List[HexHistoryEntry] = field(default_factory=list)
    ruins_loot: Dict[str, int] = field(default_factory=dict)

    @property
    def coord(self) -> HexCoord:
        return (self.q, self.r)

    @property
    def definition(self) -> BiomeDef:
        return get_biome(self.biome)

    @property
    def passable(self) -> bool:
        return is_passable(self.biome)

    def record(self, tick: int, summary: str, limit: int = 5, max_chars: int = 100) -> None:
        """Append a history entry, keeping only the newest ``limit`` entries."""
        self.history.append(HexHistoryEntry(tick=tick, summary=summary[:max_chars]))
        if len(self.history) > limit:
            del self.history[: len(self.history) - limit]

    def history_summaries(self) -> List[str]:
        return [entry.summary for entry in self.history]

    def add_loot(self, loot: Dict[str, int]) -> None:
        for item_id, quantity in loot.items():
            if quantity > 0:
                self.ruins_loot[item_id] = self.ruins_loot.get(item_id, 0) + quantity

    def take_loot(self) -> Dict[str, int]:
        loot, self.ruins_loot = self.ruins_loot, {}
        return loot

    def to_dict(self) -> Dict[str, Any]:
        return {
            "q": self.q,
            "r": self.r,
            "biome": self.biome.value,
            "ship_part": self.ship_part,
            "history": [entry.to_dict() for entry in self.history],
            "ruins_loot": dict(self.ruins_loot),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hex":
        return cls(
            q=data["q"],
            r=data["r"],
            biome=Biome(data["biome"]),
            ship_part=data.get("ship_part", False),
            history=[HexHistoryEntry.from_dict(h) for h in data.get("history", [])],
            ruins_loot=dict(data.get("ruins_loot", {})),
        )

    def __str__(self) -> str:
        return f"Hex({self.q},{self.r} {self.biome})"
