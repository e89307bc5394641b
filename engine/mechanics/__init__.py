"""
Mechanics module - Tick phase resolution systems.

This module provides stateless resolvers and helpers for each phase:
- generate_map: Map, ship part and spawn generation
- MovementResolver: Movement phase
- ActivityResolver: Gather/explore/build/craft/sleep/install/stash phase
- CombatResolver: Attacks between players sharing a hex
- resolve_survival / resolve_weather / resolve_recovery: Upkeep phases
- DeathResolver: Death, ruins loot and respawn
- escalate / apply_mutations: Planet escalation
- install_part / trigger_launch / advance_countdown / resolve_votes: Endgame
- OutcomeProvider: Narrative provider contract and fallback
- TickLedger / TickReport: Per-player reporting

Resolvers take a WorldState and mutate it in place; the TickResolver only
ever hands them a clone.
"""

from .mapgen import GeneratedMap, generate_map, map_radius
from .movement import MovementResolver, MovementResult
from .economy import resolve_build, resolve_craft, deposit, withdraw
from .combat import (
    CombatContext,
    CombatResult,
    CombatEvent,
    CombatResolver,
    resolve_combat,
    stealth_chance,
    defender_stance,
)
from .survival import resolve_survival, resolve_weather, resolve_recovery
from .death import DeathEvent, DeathResolver, reset_player, choose_respawn
from .escalation import MUTATIONS, weather_damage, escalate, should_mutate, mutate_biome, apply_mutations
from .launch import (
    CountdownResult,
    VoteResult,
    install_part,
    trigger_launch,
    cast_vote,
    resolve_votes,
    advance_countdown,
)
from .outcomes import (
    HexEventContext,
    HexEvent,
    EpilogueContext,
    OutcomeProvider,
    FallbackOutcomeProvider,
    clamp_outcomes,
    fallback_event,
    fallback_epilogue,
    safe_hex_event,
    safe_epilogue,
)
from .activities import ActivityResolver
from .reporting import TickLedger, TickReport

__all__ = [
    "GeneratedMap",
    "generate_map",
    "map_radius",
    "MovementResolver",
    "MovementResult",
    "resolve_build",
    "resolve_craft",
    "deposit",
    "withdraw",
    "CombatContext",
    "CombatResult",
    "CombatEvent",
    "CombatResolver",
    "resolve_combat",
    "stealth_chance",
    "defender_stance",
    "resolve_survival",
    "resolve_weather",
    "resolve_recovery",
    "DeathEvent",
    "DeathResolver",
    "reset_player",
    "choose_respawn",
    "MUTATIONS",
    "weather_damage",
    "escalate",
    "should_mutate",
    "mutate_biome",
    "apply_mutations",
    "CountdownResult",
    "VoteResult",
    "install_part",
    "trigger_launch",
    "cast_vote",
    "resolve_votes",
    "advance_countdown",
    "HexEventContext",
    "HexEvent",
    "EpilogueContext",
    "OutcomeProvider",
    "FallbackOutcomeProvider",
    "clamp_outcomes",
    "fallback_event",
    "fallback_epilogue",
    "safe_hex_event",
    "safe_epilogue",
    "ActivityResolver",
    "TickLedger",
    "TickReport",
]
