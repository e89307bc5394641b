"""
Game lifecycle around the engine: sessions, the due-game runner and snapshots.
"""

from .session import CODE_ALPHABET, CODE_LENGTH, GameSession, generate_game_code
from .runner import GameRunner
from .store import SnapshotStore

__all__ = [
    "CODE_ALPHABET",
    "CODE_LENGTH",
    "GameSession",
    "generate_game_code",
    "GameRunner",
    "SnapshotStore",
]
