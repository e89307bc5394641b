"""
Scheduling for many concurrent games.

The runner keeps the live sessions and their bots. Each call resolves the
sessions whose tick is due, side by side.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from agents import BaseAgent
from engine.tick import TickResult
from infra.logger import get_logger
from .session import GameSession

log = get_logger(__name__)


class GameRunner:
    """
    Resolves every game whose tick is due.

    Games share nothing, so due games are resolved concurrently, one task
    per game. A failing game is logged and left exactly as it was; the
    others still commit. Optional bots queue their intents right before
    their game resolves.
    """

    def __init__(self, sessions: Iterable[GameSession] = ()):
        self._sessions: Dict[str, GameSession] = {}
        self._agents: Dict[str, List[BaseAgent]] = {}
        for session in sessions:
            self.add(session)

    # ------------------------------------------------------------------#
    # Registry
    # ------------------------------------------------------------------#
    def add(self, session: GameSession, agents: Iterable[BaseAgent] = ()) -> GameSession:
        self._sessions[session.game_id] = session
        self._agents[session.game_id] = list(agents)
        return session

    def remove(self, game_id: str) -> Optional[GameSession]:
        self._agents.pop(game_id, None)
        return self._sessions.pop(game_id, None)

    def get(self, game_id: str) -> Optional[GameSession]:
        return self._sessions.get(game_id)

    def find_by_code(self, code: str) -> Optional[GameSession]:
        code = code.upper()
        return next((s for s in self._sessions.values() if s.code == code), None)

    @property
    def sessions(self) -> List[GameSession]:
        return list(self._sessions.values())

    def due(self, now: Optional[datetime] = None) -> List[GameSession]:
        now = now or datetime.now(timezone.utc)
        return [s for s in self._sessions.values() if s.is_due(now)]

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    async def run_due_async(self, now: Optional[datetime] = None) -> Dict[str, TickResult | Exception]:
        """
        Resolve all due games concurrently.

        Returns:
            game_id -> TickResult, or the exception that game raised
        """
        now = now or datetime.now(timezone.utc)
        due = self.due(now)
        if not due:
            return {}

        results = await asyncio.gather(
            *(self._run_one(session, now) for session in due),
            return_exceptions=True,
        )

        outcome: Dict[str, TickResult | Exception] = {}
        for session, result in zip(due, results):
            if isinstance(result, Exception):
                log.error("Tick failed for game %s: %s: %s", session.code, type(result).__name__, result)
            outcome[session.game_id] = result
        log.info("Resolved %d due game(s)", len(due))
        return outcome

    def run_due(self, now: Optional[datetime] = None) -> Dict[str, TickResult | Exception]:
        """Synchronous wrapper around run_due_async()."""
        return asyncio.run(self.run_due_async(now))

    async def _run_one(self, session: GameSession, now: datetime) -> TickResult:
        for agent in self._agents.get(session.game_id, []):
            session.submit_intents(agent.get_intents(session.world))
        return await session.resolve_tick_async(now)
