import asyncio

from engine.core.types import Biome
from engine.mechanics.outcomes import (
    EpilogueContext,
    FallbackOutcomeProvider,
    HexEvent,
    HexEventContext,
    OutcomeProvider,
    clamp_outcomes,
    fallback_event,
    safe_epilogue,
    safe_hex_event,
)

from helpers import StubRng

CONTEXT = HexEventContext(biome=Biome.FLATS, action="gather", player_name="Vega", player_health=100)
EPILOGUE = EpilogueContext(player_name="Vega", position=(0, 0), biome=Biome.SCAR, escaped=True)


class ScriptedProvider(OutcomeProvider):
    name = "scripted"

    def __init__(self, event=None, epilogue="", error=None, delay=0.0):
        self.event = event
        self.epilogue = epilogue
        self.error = error
        self.delay = delay

    async def generate_hex_event(self, context):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.event

    async def generate_epilogue(self, context):
        if self.error:
            raise self.error
        return self.epilogue


def test_clamp_outcomes():
    raw = {
        "rations": 99,
        "salvage": 5,
        "ship_parts": 3.7,
        "gold": 4,
        "biostock": -2,
        "energy_cells": "lots",
        "flag": True,
    }
    assert clamp_outcomes(raw, Biome.FLATS) == {"rations": 3, "salvage": 2, "ship_parts": 2}
    assert clamp_outcomes({"rations": float("nan")}, Biome.FLATS) == {}


def test_fallback_event_rolls_inside_yield_ranges():
    event = fallback_event(Biome.FLATS, "gather", StubRng())
    assert event.outcomes == {"rations": 1}
    assert event.narrative == "You scavenge the Flats, finding what you can."

    explore = fallback_event(Biome.RUIN, "explore", StubRng(randint_value=10))
    assert explore.outcomes == {"salvage": 4, "energy_cells": 3, "ship_parts": 1}
    assert "Ruin" in explore.narrative or "ruin" in explore.narrative


def test_fallback_provider_is_deterministic_per_seed():
    import random

    a = asyncio.run(FallbackOutcomeProvider(random.Random(3)).generate_hex_event(CONTEXT))
    b = asyncio.run(FallbackOutcomeProvider(random.Random(3)).generate_hex_event(CONTEXT))
    assert a == b


def test_safe_hex_event_clamps_provider_output():
    provider = ScriptedProvider(HexEvent("You found a cache.", {"rations": 50, "gold": 1}))
    event = asyncio.run(safe_hex_event(provider, CONTEXT, StubRng(), timeout=1.0))
    assert event.narrative == "You found a cache."
    assert event.outcomes == {"rations": 3}


def test_safe_hex_event_falls_back_on_error():
    provider = ScriptedProvider(error=RuntimeError("quota exceeded"))
    event = asyncio.run(safe_hex_event(provider, CONTEXT, StubRng(), timeout=1.0))
    assert event == fallback_event(Biome.FLATS, "gather", StubRng())


def test_safe_hex_event_falls_back_on_timeout():
    provider = ScriptedProvider(HexEvent("Too late.", {}), delay=1.0)
    event = asyncio.run(safe_hex_event(provider, CONTEXT, StubRng(), timeout=0.01))
    assert event.narrative != "Too late."
    assert event.outcomes == {"rations": 1}


def test_safe_hex_event_rejects_malformed_results():
    for bad in ({"narrative": "dict", "outcomes": {}}, HexEvent("   ", {}), HexEvent("ok", [("rations", 1)])):
        event = asyncio.run(safe_hex_event(ScriptedProvider(bad), CONTEXT, StubRng(), timeout=1.0))
        assert event.narrative.startswith("You scavenge")


def test_safe_epilogue():
    assert asyncio.run(safe_epilogue(ScriptedProvider(epilogue="  Home at last.  "), EPILOGUE, 1.0)) == "Home at last."

    blank = asyncio.run(safe_epilogue(ScriptedProvider(epilogue=""), EPILOGUE, 1.0))
    failed = asyncio.run(safe_epilogue(ScriptedProvider(error=ValueError("boom")), EPILOGUE, 1.0))
    assert blank == failed
    assert blank.startswith("Vega strapped in")
