"""
Narrative outcome providers.

The tick resolver asks an OutcomeProvider what happens when a player
gathers or explores, and for an epilogue when the game ends. Whatever the
provider returns is treated as untrusted: it is clamped to the biome's
yield ranges, bounded by a timeout, and replaced by a deterministic
fallback if the call fails or returns something unusable.
"""

from __future__ import annotations

import asyncio
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.types import Biome, HexCoord
from ..core.catalog import RESOURCES, get_biome
from infra.logger import get_logger

log = get_logger(__name__)

UNLISTED_RESOURCE_CAP = 2

GATHER_TEMPLATES = (
    "You scavenge the {name}, finding what you can.",
    "The {name} yields its resources reluctantly.",
    "A productive search through the {lower}.",
)

EXPLORE_TEMPLATES = (
    "You push deeper into the {lower}, noting landmarks.",
    "The {name} reveals new features as you explore.",
    "Something catches your eye in the {lower}.",
)

STRANDED_EPILOGUE = (
    "{name} watched the launch module disappear into the alien sky. "
    "The planet was quiet now. There was nothing left to do but make this strange world home."
)

ESCAPED_EPILOGUE = (
    "{name} strapped in as the launch module shook itself free of the wreck. "
    "The glowing planet fell away beneath them. Whatever came next, it would not be here."
)


@dataclass
class HexEventContext:
    """Everything a provider may know about one gather/explore."""
    biome: Biome
    action: str
    player_name: str
    player_health: int
    player_equipment: Dict[str, str] = field(default_factory=dict)
    hex_history: List[str] = field(default_factory=list)
    hostility: float = 0.0
    tick_number: int = 0


@dataclass
class HexEvent:
    """A narrated outcome: flavour text plus resource amounts."""
    narrative: str
    outcomes: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"narrative": self.narrative, "outcomes": dict(self.outcomes)}


@dataclass
class EpilogueContext:
    player_name: str
    position: Optional[HexCoord]
    biome: Optional[Biome]
    inventory: Dict[str, int] = field(default_factory=dict)
    discoveries: List[str] = field(default_factory=list)
    ticks_survived: int = 0
    escaped: bool = False


class OutcomeProvider(ABC):
    """Async source of hex events and epilogues."""

    name: str = "base"

    @abstractmethod
    async def generate_hex_event(self, context: HexEventContext) -> HexEvent:
        ...

    @abstractmethod
    async def generate_epilogue(self, context: EpilogueContext) -> str:
        ...


# ============================================================================
# FALLBACK
# ============================================================================

def fallback_event(biome: Biome, action: str, rng) -> HexEvent:
    """Uniform roll inside every yield range plus a templated sentence."""
    definition = get_biome(biome)
    outcomes: Dict[str, int] = {}
    for resource, yield_range in definition.yields.items():
        amount = rng.randint(yield_range.min, yield_range.max)
        if amount > 0:
            outcomes[resource] = amount

    templates = EXPLORE_TEMPLATES if action == "explore" else GATHER_TEMPLATES
    narrative = rng.choice(templates).format(name=definition.name, lower=definition.name.lower())
    return HexEvent(narrative=narrative, outcomes=outcomes)


def fallback_epilogue(context: EpilogueContext) -> str:
    template = ESCAPED_EPILOGUE if context.escaped else STRANDED_EPILOGUE
    return template.format(name=context.player_name)


class FallbackOutcomeProvider(OutcomeProvider):
    """Deterministic provider used when no narrator is configured."""

    name = "fallback"

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()

    async def generate_hex_event(self, context: HexEventContext) -> HexEvent:
        return fallback_event(context.biome, context.action, self.rng)

    async def generate_epilogue(self, context: EpilogueContext) -> str:
        return fallback_epilogue(context)


# ============================================================================
# CLAMPING
# ============================================================================

def clamp_outcomes(raw: Mapping[str, Any], biome: Biome) -> Dict[str, int]:
    """
    Bound provider outcomes.

    Non-numeric values and unknown resource ids are dropped, amounts are
    floored, non-positive amounts are dropped, listed resources are capped
    at the biome's max and unlisted resources at UNLISTED_RESOURCE_CAP.
    """
    yields = get_biome(biome).yields
    clamped: Dict[str, int] = {}
    for resource, value in raw.items():
        if resource not in RESOURCES:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if isinstance(value, float) and not math.isfinite(value):
            continue
        amount = math.floor(value)
        if amount <= 0:
            continue
        yield_range = yields.get(resource)
        cap = yield_range.max if yield_range is not None else UNLISTED_RESOURCE_CAP
        clamped[resource] = min(amount, cap)
    return clamped


def _is_well_formed(event: Any) -> bool:
    if not isinstance(event, HexEvent):
        return False
    if not isinstance(event.narrative, str) or not event.narrative.strip():
        return False
    return isinstance(event.outcomes, Mapping)


async def safe_hex_event(
        provider: OutcomeProvider,
        context: HexEventContext,
        rng,
        timeout: float,
) -> HexEvent:
    """
    Ask the provider for an event, never raising.

    Exceptions, timeouts and malformed results are replaced by
    fallback_event() drawn from ``rng``; the result is always clamped.
    """
    try:
        event = await asyncio.wait_for(provider.generate_hex_event(context), timeout)
    except Exception as exc:
        log.warning("Outcome provider %s failed (%s: %s); using fallback",
                    provider.name, type(exc).__name__, exc)
        return fallback_event(context.biome, context.action, rng)

    if not _is_well_formed(event):
        log.warning("Outcome provider %s returned a malformed event; using fallback", provider.name)
        return fallback_event(context.biome, context.action, rng)

    return HexEvent(narrative=event.narrative, outcomes=clamp_outcomes(event.outcomes, context.biome))


async def safe_epilogue(provider: OutcomeProvider, context: EpilogueContext, timeout: float) -> str:
    try:
        text = await asyncio.wait_for(provider.generate_epilogue(context), timeout)
    except Exception as exc:
        log.warning("Epilogue provider %s failed (%s: %s); using fallback",
                    provider.name, type(exc).__name__, exc)
        return fallback_epilogue(context)

    if not isinstance(text, str) or not text.strip():
        return fallback_epilogue(context)
    return text.strip()
