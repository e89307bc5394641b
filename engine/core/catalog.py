"""
Static definition tables: biomes, resources, structures, items and actions.

Tables are read-only mappings of frozen records; look entries up by key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .types import ActionType, Biome, EquipmentSlot

# Resource ids (inventory keys)
RATIONS = "rations"
SALVAGE = "salvage"
BIOSTOCK = "biostock"
ENERGY_CELLS = "energy_cells"
SHIP_PARTS = "ship_parts"

# Structure ids with engine behaviour attached
LEAN_TO = "lean_to"
STASH = "stash"
WORKBENCH = "workbench"
SCANNER_ARRAY = "scanner_array"

# Buff keys
RESTED = "rested"


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class YieldRange:
    min: int
    max: int


@dataclass(frozen=True)
class BiomeDef:
    name: str
    description: str
    passable: bool
    risk: float
    yields: Mapping[str, YieldRange] = field(default_factory=lambda: _frozen({}))
    color: str = "#333333"


@dataclass(frozen=True)
class ResourceDef:
    name: str
    description: str


@dataclass(frozen=True)
class StructureDef:
    name: str
    description: str
    cost: Mapping[str, int]
    build_actions: int = 1


@dataclass(frozen=True)
class ItemDef:
    name: str
    slot: EquipmentSlot
    materials: Mapping[str, int]
    effects: str


@dataclass(frozen=True)
class ActionDef:
    name: str
    description: str
    energy_cost: int


# ============================================================================
# BIOMES
# ============================================================================

BIOMES: Mapping[Biome, BiomeDef] = _frozen({
    Biome.FLATS: BiomeDef(
        name="Flats",
        description="Barren rocky plains, low scrub. Safe, boring.",
        passable=True,
        risk=0.1,
        yields=_frozen({RATIONS: YieldRange(1, 3), SALVAGE: YieldRange(0, 2)}),
        color="#8B7355",
    ),
    Biome.BIOLUME_FOREST: BiomeDef(
        name="Biolume Forest",
        description="Glowing alien trees, dense canopy. Things live in there.",
        passable=True,
        risk=0.4,
        yields=_frozen({RATIONS: YieldRange(2, 8), BIOSTOCK: YieldRange(1, 4)}),
        color="#00FF88",
    ),
    Biome.FUNGAL_MARSH: BiomeDef(
        name="Fungal Marsh",
        description="Spore-heavy wetlands. Visibility near zero. Weird things grow.",
        passable=True,
        risk=0.7,
        yields=_frozen({RATIONS: YieldRange(3, 10), BIOSTOCK: YieldRange(2, 6)}),
        color="#7B4F8A",
    ),
    Biome.CRYSTAL_RIDGE: BiomeDef(
        name="Crystal Ridge",
        description="Jagged mineral formations. Beautiful and resource-rich.",
        passable=True,
        risk=0.4,
        yields=_frozen({SALVAGE: YieldRange(2, 6), ENERGY_CELLS: YieldRange(1, 4)}),
        color="#00BFFF",
    ),
    Biome.RUIN: BiomeDef(
        name="Ruin",
        description="Something built this. Long ago. Still hums faintly.",
        passable=True,
        risk=0.6,
        yields=_frozen({
            SALVAGE: YieldRange(1, 4),
            ENERGY_CELLS: YieldRange(0, 3),
            SHIP_PARTS: YieldRange(0, 1),
        }),
        color="#DAA520",
    ),
    Biome.VENT_FIELDS: BiomeDef(
        name="Vent Fields",
        description="Geothermal activity. Warm, energy-rich, unstable.",
        passable=True,
        risk=0.5,
        yields=_frozen({ENERGY_CELLS: YieldRange(2, 6), SALVAGE: YieldRange(0, 2)}),
        color="#FF4500",
    ),
    Biome.SCAR: BiomeDef(
        name="The Scar",
        description="Impact crater from the Meridian's breakup. Wreckage everywhere.",
        passable=True,
        risk=0.3,
        yields=_frozen({SALVAGE: YieldRange(3, 8), SHIP_PARTS: YieldRange(0, 1)}),
        color="#708090",
    ),
    Biome.CHASM: BiomeDef(
        name="Chasm",
        description="Impassable terrain. The ground drops away into darkness.",
        passable=False,
        risk=1.0,
        color="#1A1A2E",
    ),
})

# ============================================================================
# RESOURCES
# ============================================================================

RESOURCES: Mapping[str, ResourceDef] = _frozen({
    RATIONS: ResourceDef("Rations", "Food. No food = health loss."),
    SALVAGE: ResourceDef("Salvage", "Scrap metal and materials for building and crafting."),
    BIOSTOCK: ResourceDef("Biostock", "Organic materials for medicine, tools, and fuel."),
    ENERGY_CELLS: ResourceDef("Energy Cells", "Power source for equipment, scanners, and devices."),
    SHIP_PARTS: ResourceDef("Ship Parts", "Heavy components needed to repair the launch module."),
})

# ============================================================================
# STRUCTURES
# ============================================================================

STRUCTURES: Mapping[str, StructureDef] = _frozen({
    LEAN_TO: StructureDef(
        "Lean-to", "Basic shelter. Weather protection, proper rest.",
        _frozen({SALVAGE: 3}),
    ),
    "bed": StructureDef(
        "Bed", "Enables Sleep action for Rested buff (+1 energy next tick).",
        _frozen({SALVAGE: 2, BIOSTOCK: 2}),
    ),
    STASH: StructureDef(
        "Stash", "Secure storage. 8 extra inventory slots at your camp.",
        _frozen({SALVAGE: 4}),
    ),
    WORKBENCH: StructureDef(
        "Workbench", "Required to craft tools and equipment.",
        _frozen({SALVAGE: 3, BIOSTOCK: 1}), build_actions=2,
    ),
    "signal_fire": StructureDef(
        "Signal Fire", "Visible to all players within 3 hexes. Call allies or set bait.",
        _frozen({SALVAGE: 2, ENERGY_CELLS: 1}),
    ),
    SCANNER_ARRAY: StructureDef(
        "Scanner Array", "+1 vision range. Detects movement within 2 hexes.",
        _frozen({SALVAGE: 4, ENERGY_CELLS: 2}), build_actions=2,
    ),
    "barricade": StructureDef(
        "Barricade", "Defensive. Attackers take damage/energy breaking through.",
        _frozen({SALVAGE: 5}), build_actions=2,
    ),
})

# ============================================================================
# ITEMS / EQUIPMENT
# ============================================================================

ITEMS: Mapping[str, ItemDef] = _frozen({
    "makeshift_knife": ItemDef(
        "Makeshift Knife", EquipmentSlot.TOOL, _frozen({SALVAGE: 2}),
        "Basic gathering bonus (+1 yield)",
    ),
    "crystal_blade": ItemDef(
        "Crystal Blade", EquipmentSlot.WEAPON, _frozen({SALVAGE: 3, ENERGY_CELLS: 1}),
        "Solid combat weapon (+20 attack)",
    ),
    "spore_suit": ItemDef(
        "Spore Suit", EquipmentSlot.SUIT, _frozen({BIOSTOCK: 4}),
        "Fungal marsh immunity, camouflage in forests",
    ),
    "patched_scanner": ItemDef(
        "Patched Scanner", EquipmentSlot.DEVICE, _frozen({SALVAGE: 2, ENERGY_CELLS: 2}),
        "Reveals hex contents before entering",
    ),
    "chitin_shield": ItemDef(
        "Chitin Shield", EquipmentSlot.SUIT, _frozen({BIOSTOCK: 2, SALVAGE: 2}),
        "Damage reduction (-10 incoming)",
    ),
    "alien_resonator": ItemDef(
        "Alien Resonator", EquipmentSlot.DEVICE, _frozen({SALVAGE: 3, ENERGY_CELLS: 3}),
        "Unpredictable alien tech",
    ),
})

# ============================================================================
# ACTIONS
# ============================================================================

ACTIONS: Mapping[ActionType, ActionDef] = _frozen({
    ActionType.MOVE: ActionDef("Move", "Move to an adjacent hex.", 1),
    ActionType.GATHER: ActionDef("Gather", "Collect resources from your current hex.", 1),
    ActionType.EXPLORE: ActionDef(
        "Explore", "Search your hex for discoveries, ruins features, or hidden items.", 1
    ),
    ActionType.BUILD: ActionDef("Build", "Construct a structure at your camp.", 1),
    ActionType.CRAFT: ActionDef("Craft", "Create equipment at your workbench.", 1),
    ActionType.SLEEP: ActionDef("Sleep", "Rest. Grants Rested buff next tick (+1 energy).", 0),
    ActionType.ATTACK: ActionDef("Attack", "Attack another player on your hex.", 2),
    ActionType.HIDE: ActionDef("Hide", "Attempt to avoid detection on your hex.", 1),
    ActionType.INSTALL_PART: ActionDef(
        "Install Part", "Install a ship part at the hull. Must be at the hull hex.", 2
    ),
    ActionType.DEPOSIT: ActionDef("Deposit", "Move items from your inventory into your stash.", 0),
    ActionType.WITHDRAW: ActionDef("Withdraw", "Take items out of your stash.", 0),
})


def get_biome(biome: Biome) -> BiomeDef:
    return BIOMES[biome]


def is_passable(biome: Biome) -> bool:
    return BIOMES[biome].passable


def get_structure(structure_id: str) -> Optional[StructureDef]:
    return STRUCTURES.get(structure_id)


def get_item(item_id: str) -> Optional[ItemDef]:
    return ITEMS.get(item_id)


def action_cost(action_type: ActionType) -> int:
    return ACTIONS[action_type].energy_cost
