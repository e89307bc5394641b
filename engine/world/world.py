"""
WorldState - Central game state.

The WorldState is the heart of the simulation. It:
- Owns the hex map and every player (in join order)
- Tracks game lifecycle, tick counter and hostility
- Tracks the launch sequence (parts, countdown, votes)
- Carries the game rules and the injected random source
"""

from __future__ import annotations

import copy
import json
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .hex import Hex
from .player import Player
from .factions import FactionManager
from ..core.types import GameStatus, HexCoord
from ..core.rules import DEFAULT_RULES, GameRules


@dataclass
class LaunchVote:
    """One ballot to eject ``target_id`` from the launch module."""
    voter_id: str
    target_id: str
    tick_number: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"voter_id": self.voter_id, "target_id": self.target_id, "tick_number": self.tick_number}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LaunchVote":
        return cls(voter_id=data["voter_id"], target_id=data["target_id"], tick_number=data.get("tick_number", 0))


class WorldState:
    """
    The complete state of one game.

    WorldState does NOT resolve anything itself: movement, combat, survival
    and the rest live in ``engine.mechanics`` and are sequenced by the
    TickResolver, which always works on a clone.
    """

    def __init__(
            self,
            game_id: str = "",
            code: str = "",
            name: str = "",
            rules: GameRules = DEFAULT_RULES,
            seed: Optional[int] = None,
            rng: Any = None,
    ):
        self.game_id = game_id
        self.code = code
        self.name = name
        self.rules = rules

        # Lifecycle
        self.status: GameStatus = GameStatus.LOBBY
        self.tick_number: int = 0
        self.hostility: float = 0.0

        # Map
        self.radius: int = 0
        self.hull: HexCoord = (0, 0)
        self._hexes: Dict[HexCoord, Hex] = {}

        # Players in join order
        self._players: Dict[str, Player] = {}
        self.factions = FactionManager()

        # Launch sequence
        self.seats: int = 0
        self.parts_installed: int = 0
        self.parts_required: int = 0
        self.launch_countdown: Optional[int] = None
        self.votes: List[LaunchVote] = []

        # Random number generator (any object with random/randrange/randint/choice/shuffle)
        self.rng = rng if rng is not None else random.Random(seed)

    # ========================================================================
    # HEXES
    # ========================================================================

    def set_hexes(self, hexes: Iterable[Hex]) -> None:
        self._hexes = {h.coord: h for h in hexes}

    def get_hex(self, coord: HexCoord) -> Optional[Hex]:
        return self._hexes.get(tuple(coord))

    @property
    def hexes(self) -> List[Hex]:
        """All hexes in map order."""
        return list(self._hexes.values())

    def passable_hexes(self) -> List[Hex]:
        return [h for h in self._hexes.values() if h.passable]

    @property
    def hull_hex(self) -> Optional[Hex]:
        return self._hexes.get(self.hull)

    # ========================================================================
    # PLAYERS
    # ========================================================================

    def add_player(self, player: Player) -> Player:
        """
        Register a player.

        Raises:
            ValueError: If the id is already taken
        """
        if player.id in self._players:
            raise ValueError(f"Player already in game: {player.id}")
        self._players[player.id] = player
        return player

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    @property
    def players(self) -> List[Player]:
        """All players in join order."""
        return list(self._players.values())

    def living_players(self) -> List[Player]:
        return [p for p in self._players.values() if p.is_alive]

    def players_at(self, coord: HexCoord, alive_only: bool = True) -> List[Player]:
        coord = tuple(coord)
        return [
            p for p in self._players.values()
            if p.position == coord and (p.is_alive or not alive_only)
        ]

    def player_hex(self, player: Player) -> Optional[Hex]:
        if player.position is None:
            return None
        return self._hexes.get(player.position)

    # ========================================================================
    # STATE QUERIES
    # ========================================================================

    @property
    def is_active(self) -> bool:
        return self.status == GameStatus.ACTIVE

    @property
    def launch_in_progress(self) -> bool:
        return self.launch_countdown is not None and self.launch_countdown > 0

    # ========================================================================
    # UTILITY
    # ========================================================================
    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize world state to a JSON-compatible dictionary.

        The random state is included only for ``random.Random`` sources.
        """
        data = {
            "game_id": self.game_id,
            "code": self.code,
            "name": self.name,
            "rules": self.rules.to_dict(),
            "status": self.status.value,
            "tick_number": self.tick_number,
            "hostility": self.hostility,
            "radius": self.radius,
            "hull": list(self.hull),
            "hexes": [h.to_dict() for h in self._hexes.values()],
            "players": [p.to_dict() for p in self._players.values()],
            "factions": self.factions.to_dict(),
            "seats": self.seats,
            "parts_installed": self.parts_installed,
            "parts_required": self.parts_required,
            "launch_countdown": self.launch_countdown,
            "votes": [v.to_dict() for v in self.votes],
        }
        if isinstance(self.rng, random.Random):
            data["rng_state"] = self.rng.getstate()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WorldState:
        world = cls(
            game_id=data.get("game_id", ""),
            code=data.get("code", ""),
            name=data.get("name", ""),
            rules=GameRules.from_dict(data.get("rules", {})),
        )
        world.status = GameStatus(data.get("status", "lobby"))
        world.tick_number = data.get("tick_number", 0)
        world.hostility = data.get("hostility", 0.0)
        world.radius = data.get("radius", 0)
        world.hull = tuple(data.get("hull", (0, 0)))
        world.set_hexes(Hex.from_dict(h) for h in data.get("hexes", []))
        for player_data in data.get("players", []):
            world.add_player(Player.from_dict(player_data))
        world.factions = FactionManager.from_dict(data.get("factions", {}))
        world.seats = data.get("seats", 0)
        world.parts_installed = data.get("parts_installed", 0)
        world.parts_required = data.get("parts_required", 0)
        world.launch_countdown = data.get("launch_countdown")
        world.votes = [LaunchVote.from_dict(v) for v in data.get("votes", [])]

        # JSON turns the state tuple (version, (624 ints..., pos), gauss_next) into lists
        rng_state = data.get("rng_state")
        if rng_state is not None:
            if isinstance(rng_state, list):
                inner = tuple(rng_state[1]) if isinstance(rng_state[1], list) else rng_state[1]
                rng_state = (rng_state[0], inner, rng_state[2])
            world.rng.setstate(rng_state)

        return world

    def to_json(self, filepath: Optional[str] = None, indent: int = 2) -> str:
        json_str = json.dumps(self.to_dict(), indent=indent, ensure_ascii=True)

        if filepath:
            with open(filepath, "w") as f:
                f.write(json_str)

        return json_str

    @classmethod
    def from_json(cls, json_str: Optional[str] = None, filepath: Optional[str] = None) -> WorldState:
        """
        Deserialize from JSON.

        Raises:
            ValueError: If neither json_str nor filepath provided
        """
        if filepath:
            with open(filepath, "r") as f:
                json_str = f.read()

        if not json_str:
            raise ValueError("Must provide either json_str or filepath")

        return cls.from_dict(json.loads(json_str))

    def clone(self) -> WorldState:
        """
        Independent deep copy, including a copy of the random source.

        Advancing the clone's rng leaves this world's rng untouched.
        """
        world = WorldState.from_dict(self.to_dict())
        world.rng = copy.deepcopy(self.rng)
        return world

    def __str__(self) -> str:
        alive = len(self.living_players())
        return (f"WorldState({self.code or self.game_id}, {self.status}, tick={self.tick_number}, "
                f"players={alive}/{len(self._players)}, hostility={self.hostility:.2f})")

    def __repr__(self) -> str:
        return (f"WorldState(hexes={len(self._hexes)}, players={len(self._players)}, "
                f"tick={self.tick_number}, status={self.status})")
