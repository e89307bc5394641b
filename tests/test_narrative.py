import asyncio

import pytest
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from engine.core.types import Biome
from engine.mechanics.outcomes import (
    EpilogueContext,
    FallbackOutcomeProvider,
    HexEventContext,
    fallback_event,
    safe_hex_event,
)
from infra.settings import Settings
from narrative import (
    LLMNarrator,
    available_providers,
    create_provider,
    provider_from_settings,
    resolve_provider_class,
)
from narrative.prompts import NARRATOR_SYSTEM_PROMPT, build_epilogue_prompt, build_hex_event_prompt

from helpers import StubRng

CONTEXT = HexEventContext(
    biome=Biome.FLATS,
    action="gather",
    player_name="Vega",
    player_health=80,
    player_equipment={"weapon": "crystal_blade"},
    hostility=0.5,
    tick_number=4,
)


def test_hex_event_prompt():
    prompt = build_hex_event_prompt(CONTEXT)
    assert "Biome: flats (Flats)" in prompt
    assert "health: 80/100" in prompt
    assert "Planet hostility: 50%" in prompt
    assert "rations: 1-3, salvage: 0-2" in prompt
    assert "Hex history: First visit" in prompt
    assert '"weapon": "crystal_blade"' in prompt


def test_hex_event_prompt_includes_history():
    context = HexEventContext(biome=Biome.RUIN, action="explore", player_name="Orin", player_health=100,
                              hex_history=["Found a hatch.", "Heard humming."])
    assert "Hex history: Found a hatch.; Heard humming." in build_hex_event_prompt(context)


def test_system_prompt_lists_resource_ids():
    assert "rations, salvage, biostock, energy_cells, ship_parts" in NARRATOR_SYSTEM_PROMPT


def test_epilogue_prompt():
    escaped = EpilogueContext("Vega", (0, 0), Biome.SCAR, {"rations": 2}, ["Ruin (1,-1)"], 12, True)
    prompt = build_epilogue_prompt(escaped)
    assert "Fate: escaped aboard the launch module" in prompt
    assert "Location: scar hex at (0, 0)" in prompt
    assert "Discoveries: Ruin (1,-1)" in prompt

    stranded = EpilogueContext("Orin", None, None)
    prompt = build_epilogue_prompt(stranded)
    assert "Fate: left behind" in prompt
    assert "Location: unknown" in prompt
    assert "Discoveries: none" in prompt


def test_llm_narrator_structured_hex_event():
    model = TestModel(custom_output_args={"narrative": "Dust devils part around you.", "outcomes": {"rations": 2}})
    event = asyncio.run(LLMNarrator(model=model).generate_hex_event(CONTEXT))
    assert event.narrative == "Dust devils part around you."
    assert event.outcomes == {"rations": 2}


def test_llm_narrator_epilogue_text():
    model = TestModel(custom_output_text="The sky closed behind them.")
    context = EpilogueContext("Vega", (0, 0), Biome.SCAR, escaped=True)
    assert asyncio.run(LLMNarrator(model=model).generate_epilogue(context)) == "The sky closed behind them."


def test_llm_output_is_clamped_by_engine():
    model = TestModel(custom_output_args={"narrative": "A bounty!", "outcomes": {"rations": 30, "gold": 5}})
    event = asyncio.run(safe_hex_event(LLMNarrator(model=model), CONTEXT, StubRng(), timeout=5.0))
    assert event.narrative == "A bounty!"
    assert event.outcomes == {"rations": 3}


def test_llm_failure_falls_back():
    def offline(messages, info: AgentInfo):
        raise RuntimeError("model offline")

    event = asyncio.run(safe_hex_event(LLMNarrator(model=FunctionModel(offline)), CONTEXT, StubRng(), timeout=5.0))
    assert event == fallback_event(Biome.FLATS, "gather", StubRng())


def test_registry_lookup():
    assert resolve_provider_class("fallback") is FallbackOutcomeProvider
    assert resolve_provider_class("llm") is LLMNarrator
    assert resolve_provider_class("engine.mechanics.outcomes.FallbackOutcomeProvider") is FallbackOutcomeProvider
    assert isinstance(create_provider("fallback", rng=StubRng()), FallbackOutcomeProvider)

    assert available_providers() == ["fallback", "llm"]
    with pytest.raises(ValueError, match="known: fallback, llm"):
        resolve_provider_class("oracle")
    with pytest.raises(TypeError):
        resolve_provider_class("engine.core.rules.GameRules")


def test_provider_from_settings():
    assert provider_from_settings(Settings()) is None

    narrator = provider_from_settings(Settings(narrator="llm", narrator_model="test"))
    assert isinstance(narrator, LLMNarrator)
    assert narrator.model == "test"
