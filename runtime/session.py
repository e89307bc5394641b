"""
GameSession - one game's lifecycle around the pure tick resolver.

The session owns the mutable pieces the resolver must not touch: the lobby,
the per-tick action queue, the schedule and the commit hooks that hand each
resolved tick to persistence or broadcast collaborators.
"""

from __future__ import annotations

import asyncio
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from engine.core.actions import Action
from engine.core.errors import GameStartError, InvalidAction
from engine.core.rules import DEFAULT_RULES, GameRules
from engine.core.types import ActionType, GameStatus
from engine.core.validation import require_valid
from engine.mechanics.launch import cast_vote, trigger_launch
from engine.mechanics.mapgen import GeneratedMap, generate_map
from engine.mechanics.outcomes import OutcomeProvider
from engine.mechanics.reporting import TickReport
from engine.tick import DEFAULT_PROVIDER_TIMEOUT, TickResolver, TickResult
from engine.world.factions import Faction, FactionInvite
from engine.world.fog import player_vision, visible_players
from engine.world.hex import Hex
from engine.world.player import Player
from engine.world.world import LaunchVote, WorldState
from infra.logger import get_logger
from infra.settings import Settings, get_settings

log = get_logger(__name__)

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6
DEFAULT_TICK_INTERVAL = timedelta(hours=12)

CommitHook = Callable[[WorldState, List[TickReport]], None]


def generate_game_code(rng, length: int = CODE_LENGTH) -> str:
    """Short join code without the easily confused I/O/0/1."""
    return "".join(rng.choice(CODE_ALPHABET) for _ in range(length))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameSession:
    """
    Lobby, action ingress and tick commit for a single game.

    Typical flow:
        session = GameSession(name="Crash Site", seed=7)
        for name in ("Ada", "Bo", "Cy"):
            session.join(name)
        session.start()
        session.submit_action(player_id, "gather")
        result = session.resolve_tick()

    Args:
        name: Display name of the game
        rules: Balance knobs for this game
        seed: Seed for the game's random source (ignored when rng is given)
        rng: Injected random source
        provider: Narrative provider; None uses the deterministic fallback
        provider_timeout: Seconds allowed per provider call
        tick_interval: Wall-clock time between scheduled ticks
        game_id: Explicit id (a random hex id by default)
        world: Existing world to wrap (restored snapshots); the arguments above
            that describe a new world are then ignored
    """

    def __init__(
            self,
            name: str = "",
            rules: GameRules = DEFAULT_RULES,
            seed: Optional[int] = None,
            rng: Any = None,
            provider: Optional[OutcomeProvider] = None,
            provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
            tick_interval: timedelta | float = DEFAULT_TICK_INTERVAL,
            game_id: Optional[str] = None,
            world: Optional[WorldState] = None,
    ):
        if world is None:
            rng = rng if rng is not None else random.Random(seed)
            world = WorldState(
                game_id=game_id or uuid.uuid4().hex,
                code=generate_game_code(rng),
                name=name,
                rules=rules,
                rng=rng,
            )
        self.world = world
        self.provider = provider
        self.provider_timeout = provider_timeout
        if not isinstance(tick_interval, timedelta):
            tick_interval = timedelta(seconds=tick_interval)
        self.tick_interval = tick_interval
        self.next_tick_at: Optional[datetime] = None
        self.reports: List[TickReport] = []

        self.resolver = TickResolver()
        self._queue: List[Action] = []
        self._commit_hooks: List[CommitHook] = []
        self._resolving = False

        log.info("Session for game %s (%s) at %s", self.world.code, self.world.game_id, self.world.status)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "GameSession":
        """Build a session whose narrator, timeout and schedule come from the environment."""
        from narrative import provider_from_settings

        settings = settings or get_settings()
        kwargs.setdefault("provider", provider_from_settings(settings))
        kwargs.setdefault("provider_timeout", settings.narrator_timeout)
        kwargs.setdefault("tick_interval", settings.tick_interval_seconds)
        return cls(**kwargs)

    # ========================================================================
    # PROPERTIES
    # ========================================================================

    @property
    def game_id(self) -> str:
        return self.world.game_id

    @property
    def code(self) -> str:
        return self.world.code

    @property
    def status(self) -> GameStatus:
        return self.world.status

    @property
    def is_resolving(self) -> bool:
        return self._resolving

    def get_player(self, player_id: str) -> Player:
        player = self.world.get_player(player_id)
        if player is None:
            raise ValueError(f"Player {player_id} not found")
        return player

    # ========================================================================
    # LOBBY
    # ========================================================================

    def join(self, name: str, avatar: str = "", player_id: Optional[str] = None) -> Player:
        """
        Add a player to the lobby.

        Raises:
            GameStartError: Game already started, name empty or taken, or lobby full
        """
        if self.world.status != GameStatus.LOBBY:
            raise GameStartError("Game not found or already started")

        name = name.strip()
        if not name:
            raise GameStartError("Player name is required")
        if any(p.name.lower() == name.lower() for p in self.world.players):
            raise GameStartError("Name already taken in this game")
        if len(self.world.players) >= self.world.rules.max_players:
            raise GameStartError(f"Maximum {self.world.rules.max_players} players allowed")

        player = Player.create(player_id or uuid.uuid4().hex, name, avatar, self.world.rules)
        self.world.add_player(player)
        log.info("%s joined game %s (%d players)", name, self.code, len(self.world.players))
        return player

    def start(self, now: Optional[datetime] = None) -> GeneratedMap:
        """
        Generate the map, place every player on a spawn and open tick 1.

        Raises:
            GameStartError: Not in the lobby, or player count outside the allowed range
        """
        world = self.world
        rules = world.rules
        if world.status != GameStatus.LOBBY:
            raise GameStartError("Game already started")

        count = len(world.players)
        if count < rules.min_players:
            raise GameStartError(f"Need at least {rules.min_players} players to start")
        if count > rules.max_players:
            raise GameStartError(f"Maximum {rules.max_players} players allowed")

        generated = generate_map(count, world.rng, rules)
        world.set_hexes(generated.hexes)
        world.hull = generated.hull
        world.radius = generated.radius
        world.seats = generated.seats
        world.parts_required = generated.parts_required
        for player, spawn in zip(world.players, generated.spawns):
            player.position = spawn

        world.status = GameStatus.ACTIVE
        world.tick_number = 1
        self.next_tick_at = (now or _utcnow()) + self.tick_interval

        log.info(
            "Game %s started: players=%d seats=%d parts_required=%d next_tick_at=%s",
            self.code, count, world.seats, world.parts_required, self.next_tick_at.isoformat(),
        )
        return generated

    # ========================================================================
    # ACTION INGRESS
    # ========================================================================

    def _ensure_accepting(self) -> None:
        if not self.world.is_active:
            raise RuntimeError(f"Game {self.code} is not active")
        if self._resolving:
            raise RuntimeError(f"Tick {self.world.tick_number} of {self.code} is resolving")

    def queued_actions(self, player_id: Optional[str] = None) -> List[Action]:
        """Unresolved intents for the current tick, in submission order."""
        return [a for a in self._queue if player_id is None or a.player_id == player_id]

    def queued_energy(self, player_id: str) -> int:
        return sum(a.energy_cost for a in self.queued_actions(player_id))

    def submit_action(
            self,
            player_id: str,
            action_type: ActionType | str,
            params: Optional[Mapping[str, Any]] = None,
    ) -> Action:
        """
        Validate and queue an intent for the current tick.

        Raises:
            RuntimeError: Game not active or a tick is resolving
            ValueError: Unknown player
            InvalidAction: The validator rejected the intent
        """
        self._ensure_accepting()
        player = self.get_player(player_id)
        params = dict(params or {})
        validation = require_valid(self.world, player, action_type, params, self.queued_energy(player_id))

        action = Action(
            action_type,
            player_id,
            params,
            tick_number=self.world.tick_number,
            energy_cost=validation.energy_cost,
        )
        self._queue.append(action)
        log.debug("Queued %s", action)
        return action

    def submit_intents(self, actions: Sequence[Action]) -> List[Action]:
        """
        Queue bot-produced intents, dropping those the validator rejects.

        Returns:
            The actions that were accepted
        """
        accepted: List[Action] = []
        for intent in actions:
            try:
                accepted.append(self.submit_action(intent.player_id, intent.type, intent.params))
            except InvalidAction as exc:
                log.debug("Dropped intent %s: %s (%s)", intent, exc, exc.error_code)
        return accepted

    def cancel_action(self, action_id: str, player_id: str) -> bool:
        """
        Withdraw a queued intent before its tick resolves.

        Returns:
            True if the player's action was removed, False if there was none

        Raises:
            RuntimeError: Game not active or a tick is resolving
        """
        self._ensure_accepting()
        for index, action in enumerate(self._queue):
            if action.id == action_id and action.player_id == player_id and not action.resolved:
                del self._queue[index]
                log.debug("Cancelled %s", action)
                return True
        return False

    # ========================================================================
    # VISIBILITY
    # ========================================================================

    def visible_hexes(self, player_id: str) -> List[Hex]:
        self.get_player(player_id)
        return player_vision(self.world, player_id)

    def visible_players(self, player_id: str) -> List[Player]:
        self.get_player(player_id)
        return visible_players(self.world, player_id)

    # ========================================================================
    # LAUNCH
    # ========================================================================

    def trigger_launch(self, player_id: str) -> int:
        """
        Start the launch countdown on behalf of a living player.

        Raises:
            InsufficientParts / LaunchInProgress: See engine.mechanics.launch
        """
        self._ensure_accepting()
        player = self.get_player(player_id)
        if not player.is_alive:
            raise RuntimeError(f"{player.name} is dead and cannot trigger the launch")
        countdown = trigger_launch(self.world)
        log.info("Launch triggered in %s by %s: %d ticks", self.code, player.name, countdown)
        return countdown

    def cast_vote(self, voter_id: str, target_id: str) -> LaunchVote:
        self._ensure_accepting()
        ballot = cast_vote(self.world, voter_id, target_id)
        log.info("Vote in %s: %s -> %s", self.code, voter_id, target_id)
        return ballot

    # ========================================================================
    # FACTIONS
    # ========================================================================

    def create_faction(self, player_id: str, name: str) -> Faction:
        self.get_player(player_id)
        faction = self.world.factions.create_faction(name, player_id)
        log.info("Faction %s created in %s by %s", name, self.code, player_id)
        return faction

    def invite_to_faction(self, faction_id: str, target_player_id: str, invited_by: str) -> FactionInvite:
        self.get_player(invited_by)
        self.get_player(target_player_id)
        return self.world.factions.invite(faction_id, target_player_id, invited_by)

    def accept_invite(self, invite_id: str, player_id: str) -> None:
        self.world.factions.accept_invite(invite_id, player_id)

    def decline_invite(self, invite_id: str, player_id: str) -> None:
        self.world.factions.decline_invite(invite_id, player_id)

    def leave_faction(self, faction_id: str, player_id: str) -> None:
        self.world.factions.leave(faction_id, player_id)

    # ========================================================================
    # TICK
    # ========================================================================

    def add_commit_hook(self, hook: CommitHook) -> None:
        """Register a callable receiving ``(world, reports)`` after every committed tick."""
        self._commit_hooks.append(hook)

    def is_due(self, now: Optional[datetime] = None) -> bool:
        if not self.world.is_active or self.next_tick_at is None:
            return False
        return self.next_tick_at <= (now or _utcnow())

    async def resolve_tick_async(self, now: Optional[datetime] = None) -> TickResult:
        """
        Resolve the current tick and commit the result.

        Submissions and cancellations are rejected while the resolver runs.
        If resolution raises, nothing is committed and the queue is kept.

        Raises:
            RuntimeError: Game not active or already resolving
        """
        self._ensure_accepting()
        self._resolving = True
        try:
            result = await self.resolver.resolve_async(
                self.world,
                list(self._queue),
                provider=self.provider,
                provider_timeout=self.provider_timeout,
            )
        finally:
            self._resolving = False

        self._commit(result, now)
        return result

    def resolve_tick(self, now: Optional[datetime] = None) -> TickResult:
        """Synchronous wrapper around resolve_tick_async()."""
        return asyncio.run(self.resolve_tick_async(now))

    def _commit(self, result: TickResult, now: Optional[datetime]) -> None:
        consumed = {a.id for a in result.resolved_actions}
        self.world = result.world
        self._queue = [
            a for a in self._queue
            if a.id not in consumed and a.tick_number >= self.world.tick_number
        ]
        self.reports.extend(result.reports)

        if self.world.is_active:
            self.next_tick_at = (now or _utcnow()) + self.tick_interval
        else:
            self.next_tick_at = None
            log.info("Game %s finished at tick %d", self.code, self.world.tick_number)

        for hook in self._commit_hooks:
            hook(self.world, result.reports)

    def reports_for(self, player_id: str) -> List[TickReport]:
        return [r for r in self.reports if r.player_id == player_id]

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "world": self.world.to_dict(),
            "queue": [a.to_dict() for a in self._queue],
            "next_tick_at": self.next_tick_at.isoformat() if self.next_tick_at else None,
            "tick_interval_seconds": self.tick_interval.total_seconds(),
        }

    @classmethod
    def from_dict(
            cls,
            data: Dict[str, Any],
            provider: Optional[OutcomeProvider] = None,
            provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> "GameSession":
        session = cls(
            provider=provider,
            provider_timeout=provider_timeout,
            tick_interval=data.get("tick_interval_seconds", DEFAULT_TICK_INTERVAL.total_seconds()),
            world=WorldState.from_dict(data["world"]),
        )
        session._queue = [Action.from_dict(a) for a in data.get("queue", [])]
        next_tick_at = data.get("next_tick_at")
        session.next_tick_at = datetime.fromisoformat(next_tick_at) if next_tick_at else None
        return session

    def __repr__(self) -> str:
        return f"GameSession({self.code}, {self.status}, tick={self.world.tick_number}, queued={len(self._queue)})"
