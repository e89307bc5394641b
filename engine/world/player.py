"""
Player - a stranded survivor.

Players are created when they join a game and persist across deaths:
dying resets them to a fresh state but keeps their discoveries.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.types import EquipmentSlot, HexCoord
from ..core.catalog import LEAN_TO, RESTED
from ..core.errors import InsufficientMaterials, InventoryFull
from ..core.rules import DEFAULT_RULES, GameRules


def _add_stack(stacks: Dict[str, int], item_id: str, quantity: int, slots: int) -> None:
    if quantity <= 0:
        return
    if item_id not in stacks and len(stacks) >= slots:
        raise InventoryFull(f"No free slot for {item_id} ({slots} slots in use)")
    stacks[item_id] = stacks.get(item_id, 0) + quantity


def _remove_stack(stacks: Dict[str, int], item_id: str, quantity: int) -> None:
    held = stacks.get(item_id, 0)
    if held < quantity:
        raise InsufficientMaterials(f"Not enough {item_id} (need {quantity}, have {held})")
    held -= quantity
    if held > 0:
        stacks[item_id] = held
    else:
        stacks.pop(item_id, None)


@dataclass
class Player:
    """
    A survivor in one game.

    Attributes:
        id: Unique player id
        name: Display name (unique within a game)
        avatar: Free-form avatar key for clients
        position: Current hex, None until the game starts
        camp: Hex where structures stand, None until the first build
        health: 0..max_health
        energy: 0..max_energy
        inventory: item id -> quantity, bounded by inventory_slots stacks
        stash: item id -> quantity, bounded by stash_slots stacks
        equipment: slot -> item id, at most one item per slot
        structures: structure ids built at the camp
        discoveries: things found while exploring (kept across deaths)
        buffs: transient effects such as "rested"
        is_alive: False between a lethal hit and the death phase
        is_winner: None while the game runs, then True/False
    """
    id: str
    name: str
    avatar: str = ""
    position: Optional[HexCoord] = None
    camp: Optional[HexCoord] = None
    health: int = DEFAULT_RULES.starting_health
    energy: int = DEFAULT_RULES.starting_energy
    inventory: Dict[str, int] = field(default_factory=dict)
    stash: Dict[str, int] = field(default_factory=dict)
    equipment: Dict[EquipmentSlot, str] = field(default_factory=dict)
    structures: List[str] = field(default_factory=list)
    discoveries: List[str] = field(default_factory=list)
    buffs: Dict[str, Any] = field(default_factory=dict)
    is_alive: bool = True
    is_winner: Optional[bool] = None

    @classmethod
    def create(cls, player_id: str, name: str, avatar: str = "", rules: GameRules = DEFAULT_RULES) -> "Player":
        """Fresh player as it exists right after joining."""
        return cls(
            id=player_id,
            name=name,
            avatar=avatar,
            health=rules.starting_health,
            energy=rules.starting_energy,
        )

    # ========================================================================
    # INVENTORY
    # ========================================================================

    def quantity(self, item_id: str) -> int:
        return self.inventory.get(item_id, 0)

    def has_items(self, costs: Mapping[str, int]) -> bool:
        return all(self.quantity(item_id) >= amount for item_id, amount in costs.items())

    def add_item(self, item_id: str, quantity: int = 1, slots: int = DEFAULT_RULES.inventory_slots) -> None:
        """
        Add to an inventory stack.

        Raises:
            InventoryFull: If a new stack is needed and every slot is taken
        """
        _add_stack(self.inventory, item_id, quantity, slots)

    def remove_item(self, item_id: str, quantity: int = 1) -> None:
        """
        Remove from an inventory stack, dropping it when it reaches zero.

        Raises:
            InsufficientMaterials: If fewer than ``quantity`` are held
        """
        _remove_stack(self.inventory, item_id, quantity)
        if item_id not in self.inventory:
            for slot in [s for s, equipped in self.equipment.items() if equipped == item_id]:
                del self.equipment[slot]

    def consume(self, costs: Mapping[str, int]) -> None:
        """Remove every listed cost, all or nothing."""
        for item_id, amount in costs.items():
            if self.quantity(item_id) < amount:
                raise InsufficientMaterials(
                    f"Not enough {item_id} (need {amount}, have {self.quantity(item_id)})"
                )
        for item_id, amount in costs.items():
            _remove_stack(self.inventory, item_id, amount)

    def stash_item(self, item_id: str, quantity: int, slots: int = DEFAULT_RULES.stash_slots) -> None:
        _add_stack(self.stash, item_id, quantity, slots)

    def unstash_item(self, item_id: str, quantity: int) -> None:
        _remove_stack(self.stash, item_id, quantity)

    # ========================================================================
    # CAMP / EQUIPMENT
    # ========================================================================

    @property
    def at_camp(self) -> bool:
        return self.camp is not None and self.camp == self.position

    def has_structure(self, structure_id: str) -> bool:
        return structure_id in self.structures

    @property
    def is_sheltered(self) -> bool:
        """Standing at a camp that has a lean-to."""
        return self.at_camp and self.has_structure(LEAN_TO)

    @property
    def is_rested(self) -> bool:
        return bool(self.buffs.get(RESTED))

    def equipped(self, slot: EquipmentSlot) -> Optional[str]:
        return self.equipment.get(slot)

    def equip(self, slot: EquipmentSlot, item_id: str) -> bool:
        """Equip into an empty slot. Returns False if the slot is taken."""
        if slot in self.equipment:
            return False
        self.equipment[slot] = item_id
        return True

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "avatar": self.avatar,
            "position": list(self.position) if self.position is not None else None,
            "camp": list(self.camp) if self.camp is not None else None,
            "health": self.health,
            "energy": self.energy,
            "inventory": dict(self.inventory),
            "stash": dict(self.stash),
            "equipment": {slot.value: item_id for slot, item_id in self.equipment.items()},
            "structures": list(self.structures),
            "discoveries": list(self.discoveries),
            "buffs": dict(self.buffs),
            "is_alive": self.is_alive,
            "is_winner": self.is_winner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        position = data.get("position")
        camp = data.get("camp")
        return cls(
            id=data["id"],
            name=data["name"],
            avatar=data.get("avatar", ""),
            position=tuple(position) if position is not None else None,
            camp=tuple(camp) if camp is not None else None,
            health=data["health"],
            energy=data["energy"],
            inventory=dict(data.get("inventory", {})),
            stash=dict(data.get("stash", {})),
            equipment={EquipmentSlot(slot): item_id for slot, item_id in data.get("equipment", {}).items()},
            structures=list(data.get("structures", [])),
            discoveries=list(data.get("discoveries", [])),
            buffs=dict(data.get("buffs", {})),
            is_alive=data.get("is_alive", True),
            is_winner=data.get("is_winner"),
        )

    def label(self) -> str:
        return f"{self.name}#{self.id}"

    def __str__(self) -> str:
        status = "alive" if self.is_alive else "dead"
        return f"Player({self.name} @ {self.position}, hp={self.health}, en={self.energy}, {status})"
