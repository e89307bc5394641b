"""
Game balance knobs.

GameRules is immutable; sessions may supply a customised copy via
dataclasses.replace(DEFAULT_RULES, ...).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class GameRules:
    total_ticks: int = 28
    max_energy: int = 9
    base_energy_per_tick: int = 3
    inventory_slots: int = 6
    max_structures: int = 6
    stash_slots: int = 8
    max_health: int = 100
    starting_health: int = 100
    starting_energy: int = 3
    seat_percentage: float = 0.35
    launch_countdown_ticks: int = 3
    ship_parts_multiplier: int = 2
    hexes_per_player: int = 9
    min_players: int = 3
    max_players: int = 20
    starvation_damage: int = 15
    base_vision_range: int = 1
    scanner_vision_bonus: int = 1
    history_limit: int = 5
    history_summary_chars: int = 100

    @property
    def hostility_step(self) -> float:
        """Hostility gained per tick; reaches 1.0 after total_ticks."""
        return 1 / self.total_ticks

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameRules":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


DEFAULT_RULES = GameRules()


def calculate_seats(player_count: int, rules: GameRules = DEFAULT_RULES) -> int:
    """Escape seats available at launch."""
    return max(1, math.floor(player_count * rules.seat_percentage))


def calculate_required_parts(player_count: int, rules: GameRules = DEFAULT_RULES) -> int:
    """Ship parts that must be installed before launch can be triggered."""
    return calculate_seats(player_count, rules) * rules.ship_parts_multiplier
