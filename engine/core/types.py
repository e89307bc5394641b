"""
Core type definitions for the Meridian survival engine.

This module contains the fundamental enums, aliases and small result
records used throughout the system. No game logic, just pure data.
"""

from __future__ import annotations
from enum import Enum
from typing import Tuple
from dataclasses import dataclass

# ============================================================================
# SPATIAL TYPES
# ============================================================================

# Axial hex coordinate: (q, r). The implicit third cube axis is s = -q - r.
HexCoord = Tuple[int, int]


class Biome(Enum):
    """Terrain category of a hex. Attributes live in the catalog."""
    FLATS = "flats"
    BIOLUME_FOREST = "biolume_forest"
    FUNGAL_MARSH = "fungal_marsh"
    CRYSTAL_RIDGE = "crystal_ridge"
    RUIN = "ruin"
    VENT_FIELDS = "vent_fields"
    SCAR = "scar"
    CHASM = "chasm"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# GAME LIFECYCLE
# ============================================================================

class GameStatus(Enum):
    """Lifecycle of a single game."""
    LOBBY = "lobby"
    ACTIVE = "active"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# ACTIONS
# ============================================================================

class ActionType(Enum):
    """Intents a player can queue for the next tick."""
    MOVE = "move"
    GATHER = "gather"
    EXPLORE = "explore"
    BUILD = "build"
    CRAFT = "craft"
    SLEEP = "sleep"
    ATTACK = "attack"
    HIDE = "hide"
    INSTALL_PART = "install_part"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "ActionType | str") -> "ActionType | None":
        """Return the matching action type, or None when unknown."""
        if isinstance(value, ActionType):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class EquipmentSlot(Enum):
    """Equipment slots; each holds at most one item id."""
    TOOL = "tool"
    WEAPON = "weapon"
    SUIT = "suit"
    DEVICE = "device"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# OUTCOMES
# ============================================================================

class CombatOutcome(Enum):
    """Result of one attack from the attacker's point of view."""
    DECISIVE_WIN = "decisive_win"
    CLOSE_WIN = "close_win"
    STALEMATE = "stalemate"
    LOSS = "loss"
    EVADED = "evaded"

    def __str__(self) -> str:
        return self.value.replace("_", " ")


class ReportType(Enum):
    """Kinds of per-player reports."""
    TICK = "tick"
    EPILOGUE = "epilogue"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# ACTION VALIDATION
# ============================================================================

@dataclass
class ActionValidation:
    """
    Structured result of validating an intent.

    Attributes:
        valid: Whether the intent may be queued
        energy_cost: Energy the intent costs (carried even when rejected)
        error_code: Machine-readable error code (None if valid)
        message: Human-readable message explaining the result

    Error codes:
        - "UNKNOWN_ACTION": Action type is not in the catalog
        - "PLAYER_DEAD": Player is not alive
        - "INSUFFICIENT_ENERGY": Queued plus new cost exceeds current energy
        - "MISSING_PARAMS": Required parameters are absent or malformed
        - "NO_POSITION": Player has not been placed on the map
        - "NOT_ADJACENT": Move target is not at distance 1
        - "NO_SUCH_HEX": Move target is off the map
        - "IMPASSABLE": Move target biome cannot be entered
        - "UNKNOWN_STRUCTURE": Build target is not in the catalog
        - "UNKNOWN_ITEM": Craft target is not in the catalog
        - "INSUFFICIENT_MATERIALS": Not enough materials held
        - "MISSING_WORKBENCH": Crafting without a workbench
        - "NOT_AT_CAMP": Stash access away from camp
        - "MISSING_STASH": Stash access without a stash structure
    """
    valid: bool
    energy_cost: int = 0
    error_code: str | None = None
    message: str = ""

    @staticmethod
    def success(energy_cost: int, message: str = "") -> ActionValidation:
        """Create a validation success result."""
        return ActionValidation(valid=True, energy_cost=energy_cost, error_code=None, message=message)

    @staticmethod
    def fail(error_code: str, message: str, energy_cost: int = 0) -> ActionValidation:
        """Create a validation failure result."""
        return ActionValidation(valid=False, energy_cost=energy_cost, error_code=error_code, message=message)
