"""
System and user prompt templates for the narrator.
"""

from __future__ import annotations

import json

from engine.core.catalog import BIOMES, RESOURCES
from engine.mechanics.outcomes import EpilogueContext, HexEventContext

NARRATOR_SYSTEM_PROMPT = """
You are the narrator for Meridian, a survival strategy game set on an alien planet.
Players are astronauts stranded after the colony ship Meridian crashed. They must survive, explore, and eventually repair the ship to escape. There aren't enough seats for everyone.

Your role: narrate what happens when a player performs an action on a hex. Be vivid, concise (2-3 sentences), and match the tone: weird planet meets pulp adventure. Strange, beautiful, dangerous, but fun.

## OUTPUT
- narrative: 2-3 sentence story of what happened.
- outcomes: resource id -> integer amount found.

Valid resource IDs: {resource_ids}
Outcomes must be integers within the yield ranges provided for the biome.
Do NOT invent new resource types. Do NOT exceed yield ranges.
""".strip().format(resource_ids=", ".join(RESOURCES))

HEX_EVENT_USER_TEMPLATE = """
Biome: {biome} ({biome_name})
Description: {description}
Action: {action}
Player: {player_name} (health: {health}/100)
Equipment: {equipment}
Planet hostility: {hostility_pct}%
Tick: {tick}
Yield ranges for this biome: {yields}
Hex history: {history}

Narrate what happens.
""".strip()

EPILOGUE_SYSTEM_PROMPT = """
You are the narrator for Meridian. Write a personal epilogue for a player at the moment the launch module leaves the planet.
3-4 sentences. Bittersweet, memorable, fitting their journey.
If they escaped, they are aboard and watching the planet fall away. If not, they are alone on this alien planet now.
Respond with plain text only.
""".strip()

EPILOGUE_USER_TEMPLATE = """
Player: {player_name}
Fate: {fate}
Location: {location}
Inventory: {inventory}
Discoveries: {discoveries}
Ticks survived: {ticks}

Write their epilogue.
""".strip()


def describe_yields(context: HexEventContext) -> str:
    definition = BIOMES[context.biome]
    if not definition.yields:
        return "none"
    return ", ".join(f"{resource}: {r.min}-{r.max}" for resource, r in definition.yields.items())


def build_hex_event_prompt(context: HexEventContext) -> str:
    definition = BIOMES[context.biome]
    return HEX_EVENT_USER_TEMPLATE.format(
        biome=context.biome.value,
        biome_name=definition.name,
        description=definition.description,
        action=context.action,
        player_name=context.player_name,
        health=context.player_health,
        equipment=json.dumps(context.player_equipment),
        hostility_pct=round(context.hostility * 100),
        tick=context.tick_number,
        yields=describe_yields(context),
        history="; ".join(context.hex_history) if context.hex_history else "First visit",
    )


def build_epilogue_prompt(context: EpilogueContext) -> str:
    if context.position is not None and context.biome is not None:
        location = f"{context.biome.value} hex at ({context.position[0]}, {context.position[1]})"
    else:
        location = "unknown"
    return EPILOGUE_USER_TEMPLATE.format(
        player_name=context.player_name,
        fate="escaped aboard the launch module" if context.escaped else "left behind",
        location=location,
        inventory=json.dumps(context.inventory),
        discoveries=", ".join(context.discoveries) or "none",
        ticks=context.ticks_survived,
    )
