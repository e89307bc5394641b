"""
TickResolver - the phase-ordered tick pipeline.

resolve_async() is a pure transform: it clones the input world, runs the
ten phases on the clone and returns the clone together with one report
per player. The input world and the input actions are never modified, so
a failure anywhere leaves the caller's state exactly as it was.

Phases, in order:
    1. movement      2. actions      3. combat      4. survival
    5. weather       6. death        7. recovery    8. escalation
    9. mutation     10. reporting (and launch countdown)
"""

from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .core.actions import Action
from .core.types import ReportType
from .world.world import WorldState
from .mechanics.activities import ActivityResolver, prefetch_targets
from .mechanics.combat import CombatEvent, CombatResolver
from .mechanics.death import DeathEvent, DeathResolver
from .mechanics.escalation import Mutation, apply_mutations, escalate
from .mechanics.launch import CountdownResult, advance_countdown
from .mechanics.movement import MovementResolver, MovementResult
from .mechanics.outcomes import (
    EpilogueContext,
    FallbackOutcomeProvider,
    HexEvent,
    HexEventContext,
    OutcomeProvider,
    safe_epilogue,
    safe_hex_event,
)
from .mechanics.reporting import TickLedger, TickReport
from .mechanics.survival import resolve_recovery, resolve_survival, resolve_weather
from infra.logger import get_logger

log = get_logger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 10.0


@dataclass
class TickResult:
    """
    Everything one resolved tick produced.

    Attributes:
        world: The next world state (a new object)
        reports: One tick report per player, plus epilogues if the ship launched
        resolved_actions: Copies of the consumed actions with ``resolved`` set
        launch: Countdown step result, None when no countdown was running
    """
    world: WorldState
    reports: List[TickReport]
    resolved_actions: List[Action]
    launch: Optional[CountdownResult] = None
    movements: List[MovementResult] = field(default_factory=list)
    combat: List[CombatEvent] = field(default_factory=list)
    deaths: List[DeathEvent] = field(default_factory=list)
    mutations: List[Mutation] = field(default_factory=list)

    @property
    def epilogues(self) -> List[TickReport]:
        return [r for r in self.reports if r.report_type == ReportType.EPILOGUE]

    def report_for(self, player_id: str) -> Optional[TickReport]:
        for report in self.reports:
            if report.player_id == player_id and report.report_type == ReportType.TICK:
                return report
        return None


class TickResolver:
    """Runs the tick pipeline; holds no game state of its own."""

    def __init__(self):
        self.movement = MovementResolver()
        self.activities = ActivityResolver()
        self.combat = CombatResolver()
        self.deaths = DeathResolver()

    def resolve(
            self,
            world: WorldState,
            actions: Sequence[Action],
            provider: Optional[OutcomeProvider] = None,
            provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> TickResult:
        """Synchronous wrapper around resolve_async()."""
        return asyncio.run(self.resolve_async(world, actions, provider, provider_timeout))

    async def resolve_async(
            self,
            world: WorldState,
            actions: Sequence[Action],
            provider: Optional[OutcomeProvider] = None,
            provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> TickResult:
        """
        Resolve one tick.

        Args:
            world: Current state; left untouched
            actions: Queued intents in submission order
            provider: Narrative provider; the deterministic fallback when None
            provider_timeout: Seconds allowed per provider call

        Raises:
            RuntimeError: If the game is not active
        """
        if not world.is_active:
            raise RuntimeError(f"Cannot resolve a tick for a game that is {world.status}")

        state = world.clone()
        tick_number = state.tick_number
        batch = [a for a in actions if not a.resolved and a.tick_number == tick_number]
        provider = provider or FallbackOutcomeProvider(state.rng)
        ledger = TickLedger(state)

        # 1. Movement
        movements = self.movement.resolve(state, batch)

        # 2. Actions (provider calls first, concurrently)
        events = await self._prefetch_events(state, batch, provider, provider_timeout)
        self.activities.resolve(state, batch, events, ledger)

        # 3. Combat
        combat = self.combat.resolve(state, batch)
        self._note_combat(state, combat, ledger)

        # 4. Survival
        for player_id, damage in resolve_survival(state).items():
            if damage:
                ledger.note(player_id, f"With nothing to eat, you lose {damage} health.")

        # 5. Weather (this tick's hostility)
        for player_id, damage in resolve_weather(state, state.hostility).items():
            if damage:
                ledger.note(player_id, f"The planet's weather batters you for {damage} damage.")

        # 6. Death & respawn
        deaths = self.deaths.resolve(state)
        for death in deaths:
            ledger.note(death.player_id, "You died. You wake somewhere else with nothing but your memories.")

        # 7. Recovery
        resolve_recovery(state)

        # 8. Escalation
        hostility = state.hostility
        state.hostility = escalate(hostility, state.rules)

        # 9. Biome mutation (rolled against the hostility the tick started with)
        mutations = apply_mutations(state, hostility)

        # 10. Reporting
        reports = ledger.build_reports(state, tick_number)
        state.tick_number = tick_number + 1

        launch = None
        if state.launch_in_progress:
            launch = advance_countdown(state)
            if launch.launched:
                reports.extend(await self._epilogues(state, tick_number, provider, provider_timeout))

        resolved = [dataclasses.replace(a, resolved=True) for a in batch]
        log.info(
            "Resolved tick %d of %s: actions=%d deaths=%d mutations=%d hostility=%.2f%s",
            tick_number, state.code or state.game_id, len(batch), len(deaths), len(mutations),
            state.hostility, " LAUNCHED" if launch and launch.launched else "",
        )
        return TickResult(
            world=state,
            reports=reports,
            resolved_actions=resolved,
            launch=launch,
            movements=movements,
            combat=combat,
            deaths=deaths,
            mutations=mutations,
        )

    @staticmethod
    async def _prefetch_events(
            state: WorldState,
            batch: List[Action],
            provider: OutcomeProvider,
            timeout: float,
    ) -> Dict[str, HexEvent]:
        targets = prefetch_targets(state, batch)
        if not targets:
            return {}

        calls = []
        for action in targets:
            player = state.get_player(action.player_id)
            hex_ = state.player_hex(player)
            context = HexEventContext(
                biome=hex_.biome,
                action=action.type.value,
                player_name=player.name,
                player_health=player.health,
                player_equipment={slot.value: item for slot, item in player.equipment.items()},
                hex_history=hex_.history_summaries(),
                hostility=state.hostility,
                tick_number=state.tick_number,
            )
            calls.append(safe_hex_event(provider, context, state.rng, timeout))

        results = await asyncio.gather(*calls)
        return {action.id: event for action, event in zip(targets, results)}

    @staticmethod
    def _note_combat(state: WorldState, combat: List[CombatEvent], ledger: TickLedger) -> None:
        for event in combat:
            ledger.note(event.attacker_id, event.summary(state))
            if event.defender_id is None or event.result is None:
                continue
            attacker = state.get_player(event.attacker_id)
            name = attacker.name if attacker else event.attacker_id
            if event.result.evaded:
                ledger.note(event.defender_id, f"{name} came looking for you, but you stayed hidden.")
            else:
                ledger.note(
                    event.defender_id,
                    f"{name} attacked you. You took {event.result.defender_damage} damage"
                    f" and dealt {event.result.attacker_damage} back.",
                )

    @staticmethod
    async def _epilogues(
            state: WorldState,
            tick_number: int,
            provider: OutcomeProvider,
            timeout: float,
    ) -> List[TickReport]:
        contexts = []
        for player in state.players:
            hex_ = state.player_hex(player)
            contexts.append(EpilogueContext(
                player_name=player.name,
                position=player.position,
                biome=hex_.biome if hex_ else None,
                inventory=dict(player.inventory),
                discoveries=list(player.discoveries),
                ticks_survived=state.tick_number,
                escaped=bool(player.is_winner),
            ))

        texts = await asyncio.gather(*(safe_epilogue(provider, ctx, timeout) for ctx in contexts))
        return [
            TickReport(
                game_id=state.game_id,
                player_id=player.id,
                tick_number=tick_number,
                report_type=ReportType.EPILOGUE,
                narrative=text,
            )
            for player, text in zip(state.players, texts)
        ]
