"""
Factions: voluntary alliances whose living members share vision.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.errors import FactionError


class InviteStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    def __str__(self) -> str:
        return self.value


@dataclass
class Faction:
    id: str
    name: str
    created_by: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "created_by": self.created_by}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Faction":
        return cls(id=data["id"], name=data["name"], created_by=data["created_by"])


@dataclass
class FactionInvite:
    id: str
    faction_id: str
    invited_player_id: str
    invited_by: str
    status: InviteStatus = InviteStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "faction_id": self.faction_id,
            "invited_player_id": self.invited_player_id,
            "invited_by": self.invited_by,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FactionInvite":
        return cls(
            id=data["id"],
            faction_id=data["faction_id"],
            invited_player_id=data["invited_player_id"],
            invited_by=data["invited_by"],
            status=InviteStatus(data.get("status", "pending")),
        )


class FactionManager:
    """
    In-memory faction bookkeeping for one game.

    A player belongs to at most one faction. Every rule violation raises
    FactionError with a human-readable message.
    """

    def __init__(self):
        self._factions: Dict[str, Faction] = {}
        self._members: Dict[str, List[str]] = {}
        self._invites: Dict[str, FactionInvite] = {}
        self._player_faction: Dict[str, str] = {}

    def create_faction(self, name: str, creator_id: str) -> Faction:
        if creator_id in self._player_faction:
            raise FactionError("Player is already in a faction")

        faction = Faction(id=uuid.uuid4().hex, name=name, created_by=creator_id)
        self._factions[faction.id] = faction
        self._members[faction.id] = [creator_id]
        self._player_faction[creator_id] = faction.id
        return faction

    def invite(self, faction_id: str, target_player_id: str, invited_by: str) -> FactionInvite:
        if faction_id not in self._factions:
            raise FactionError("Faction not found")
        if target_player_id == invited_by:
            raise FactionError("Cannot invite yourself")
        if invited_by not in self._members.get(faction_id, []):
            raise FactionError("Only faction members can invite")

        invite = FactionInvite(
            id=uuid.uuid4().hex,
            faction_id=faction_id,
            invited_player_id=target_player_id,
            invited_by=invited_by,
        )
        self._invites[invite.id] = invite
        return invite

    def _own_invite(self, invite_id: str, player_id: str) -> FactionInvite:
        invite = self._invites.get(invite_id)
        if invite is None:
            raise FactionError("Invite not found")
        if invite.invited_player_id != player_id:
            raise FactionError("Not your invite")
        return invite

    def accept_invite(self, invite_id: str, player_id: str) -> None:
        invite = self._own_invite(invite_id, player_id)
        if invite.status != InviteStatus.PENDING:
            raise FactionError("Invite already resolved")
        if player_id in self._player_faction:
            raise FactionError("Player is already in a faction")

        invite.status = InviteStatus.ACCEPTED
        self._members.setdefault(invite.faction_id, []).append(player_id)
        self._player_faction[player_id] = invite.faction_id

    def decline_invite(self, invite_id: str, player_id: str) -> None:
        invite = self._own_invite(invite_id, player_id)
        invite.status = InviteStatus.DECLINED

    def leave(self, faction_id: str, player_id: str) -> None:
        members = self._members.get(faction_id)
        if members is None:
            raise FactionError("Faction not found")
        if player_id not in members:
            raise FactionError("Not a member")

        members.remove(player_id)
        self._player_faction.pop(player_id, None)

    def get_members(self, faction_id: str) -> List[str]:
        return list(self._members.get(faction_id, []))

    def get_player_faction(self, player_id: str) -> Optional[Faction]:
        faction_id = self._player_faction.get(player_id)
        if faction_id is None:
            return None
        return self._factions.get(faction_id)

    def get_invite(self, invite_id: str) -> Optional[FactionInvite]:
        return self._invites.get(invite_id)

    def pending_invites(self, player_id: str) -> List[FactionInvite]:
        return [
            invite for invite in self._invites.values()
            if invite.invited_player_id == player_id and invite.status == InviteStatus.PENDING
        ]

    def allies_of(self, player_id: str) -> List[str]:
        """Other members of the player's faction (empty when unaffiliated)."""
        faction = self.get_player_faction(player_id)
        if faction is None:
            return []
        return [member for member in self._members[faction.id] if member != player_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factions": [faction.to_dict() for faction in self._factions.values()],
            "members": {faction_id: list(members) for faction_id, members in self._members.items()},
            "invites": [invite.to_dict() for invite in self._invites.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FactionManager":
        manager = cls()
        for faction_data in data.get("factions", []):
            faction = Faction.from_dict(faction_data)
            manager._factions[faction.id] = faction
        for faction_id, members in data.get("members", {}).items():
            manager._members[faction_id] = list(members)
            for member in members:
                manager._player_faction[member] = faction_id
        for invite_data in data.get("invites", []):
            invite = FactionInvite.from_dict(invite_data)
            manager._invites[invite.id] = invite
        return manager
