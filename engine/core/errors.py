"""
Exception hierarchy for the engine.

Everything derives from GameError so that the tick resolver can forfeit a
single offending action without aborting the whole tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ActionValidation


class GameError(Exception):
    """Base class for recoverable game rule violations."""


# ----------------------------------------------------------------------------
# Submission-time errors
# ----------------------------------------------------------------------------

class ValidationError(GameError):
    """An intent was rejected before being queued."""


class InvalidAction(ValidationError):
    """Raised by require_valid(); carries the failed validation."""

    def __init__(self, validation: ActionValidation):
        super().__init__(validation.message)
        self.validation = validation

    @property
    def error_code(self) -> str | None:
        return self.validation.error_code

    @property
    def energy_cost(self) -> int:
        return self.validation.energy_cost


# ----------------------------------------------------------------------------
# Economy
# ----------------------------------------------------------------------------

class EconomyError(GameError):
    pass


class UnknownStructure(EconomyError):
    pass


class UnknownItem(EconomyError):
    pass


class InsufficientMaterials(EconomyError):
    pass


class MaxStructuresReached(EconomyError):
    pass


class MissingWorkbench(EconomyError):
    pass


class InventoryFull(EconomyError):
    pass


class NotAtCamp(EconomyError):
    pass


class MissingStash(EconomyError):
    pass


# ----------------------------------------------------------------------------
# Launch / endgame
# ----------------------------------------------------------------------------

class LaunchError(GameError):
    pass


class NotAtHull(LaunchError):
    pass


class NoShipParts(LaunchError):
    pass


class InsufficientParts(LaunchError):
    pass


class LaunchInProgress(LaunchError):
    pass


class VoteRejected(LaunchError):
    pass


# ----------------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------------

class GameStartError(GameError):
    pass


class FactionError(GameError):
    pass
