from .types import (
    HexCoord,
    Biome,
    GameStatus,
    ActionType,
    EquipmentSlot,
    CombatOutcome,
    ReportType,
    ActionValidation,
)
from .rules import GameRules, DEFAULT_RULES, calculate_seats, calculate_required_parts
from .actions import Action
from .validation import validate_action, require_valid, allowed_actions
from . import catalog, errors

__all__ = [
    "HexCoord",
    "Biome",
    "GameStatus",
    "ActionType",
    "EquipmentSlot",
    "CombatOutcome",
    "ReportType",
    "ActionValidation",
    "GameRules",
    "DEFAULT_RULES",
    "calculate_seats",
    "calculate_required_parts",
    "Action",
    "validate_action",
    "require_valid",
    "allowed_actions",
    "catalog",
    "errors",
]
