"""
World state for the Meridian survival engine.

This module provides:
- hexgrid: Axial hex math
- Hex / Player: Map tiles and survivors
- WorldState: Central game state
- fog: Visibility rules
- FactionManager: Alliances
"""

from .hexgrid import (
    HEX_SIZE,
    DIRECTIONS,
    hex_distance,
    is_adjacent,
    neighbors,
    ring,
    spiral,
    hex_count,
    axial_to_pixel,
    pixel_to_axial,
)
from .hex import Hex, HexHistoryEntry
from .player import Player
from .factions import Faction, FactionInvite, FactionManager, InviteStatus
from .world import WorldState, LaunchVote
from .fog import visible_hexes, scanner_bonus, player_vision, visible_players

__all__ = [
    "HEX_SIZE",
    "DIRECTIONS",
    "hex_distance",
    "is_adjacent",
    "neighbors",
    "ring",
    "spiral",
    "hex_count",
    "axial_to_pixel",
    "pixel_to_axial",
    "Hex",
    "HexHistoryEntry",
    "Player",
    "Faction",
    "FactionInvite",
    "FactionManager",
    "InviteStatus",
    "WorldState",
    "LaunchVote",
    "visible_hexes",
    "scanner_bonus",
    "player_vision",
    "visible_players",
]
