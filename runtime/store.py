"""
JSON snapshot sink for resolved ticks.

Layout under the root directory (GAMES_STORAGE_DIR by default):

    <game_id>/tick_0001.json   world after tick 1 + that tick's reports
    <game_id>/latest.json      copy of the newest tick file
    <game_id>/session.json     full session (queue, schedule) when saved explicitly
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from engine.mechanics.reporting import TickReport
from engine.world.world import WorldState
from infra.logger import get_logger
from infra.paths import GAMES_STORAGE_DIR

if TYPE_CHECKING:
    from .session import GameSession

log = get_logger(__name__)

LATEST = "latest.json"
SESSION = "session.json"


class SnapshotStore:
    """File-backed store; ``save_tick`` doubles as a session commit hook."""

    def __init__(self, root: Optional[Path | str] = None, indent: int = 2):
        self.root = Path(root) if root is not None else GAMES_STORAGE_DIR
        self.indent = indent

    def game_dir(self, game_id: str) -> Path:
        return self.root / game_id

    def _write(self, path: Path, payload: Dict[str, Any]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=self.indent, ensure_ascii=True), encoding="utf-8")
        return path

    def save_tick(self, world: WorldState, reports: Sequence[TickReport]) -> Path:
        """
        Persist the world as it stands after a tick together with that tick's reports.

        The file is named after the tick that was just resolved.
        """
        resolved_tick = world.tick_number - 1
        payload = {
            "tick_number": resolved_tick,
            "world": world.to_dict(),
            "reports": [r.to_dict() for r in reports],
        }
        directory = self.game_dir(world.game_id)
        path = self._write(directory / f"tick_{resolved_tick:04d}.json", payload)
        self._write(directory / LATEST, payload)
        log.debug("Saved snapshot %s", path)
        return path

    def __call__(self, world: WorldState, reports: List[TickReport]) -> None:
        self.save_tick(world, reports)

    def list_ticks(self, game_id: str) -> List[int]:
        directory = self.game_dir(game_id)
        if not directory.exists():
            return []
        return sorted(int(p.stem.split("_", 1)[1]) for p in directory.glob("tick_*.json"))

    def load_tick(self, game_id: str, tick_number: Optional[int] = None) -> Tuple[WorldState, List[TickReport]]:
        """
        Load a tick snapshot (the latest when tick_number is None).

        Raises:
            FileNotFoundError: No such snapshot
        """
        name = LATEST if tick_number is None else f"tick_{tick_number:04d}.json"
        path = self.game_dir(game_id) / name
        data = json.loads(path.read_text(encoding="utf-8"))
        world = WorldState.from_dict(data["world"])
        reports = [TickReport.from_dict(r) for r in data.get("reports", [])]
        return world, reports

    def save_session(self, session: "GameSession") -> Path:
        path = self._write(self.game_dir(session.game_id) / SESSION, session.to_dict())
        log.info("Saved session %s to %s", session.code, path)
        return path

    def load_session(self, game_id: str, **session_kwargs: Any) -> "GameSession":
        """Restore a session saved with save_session(); kwargs go to GameSession.from_dict."""
        from .session import GameSession

        path = self.game_dir(game_id) / SESSION
        data = json.loads(path.read_text(encoding="utf-8"))
        return GameSession.from_dict(data, **session_kwargs)
