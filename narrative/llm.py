"""
LLM-backed outcome provider.

Uses pydantic-ai structured output for hex events and plain text for
epilogues. The engine still clamps, times out and falls back around every
call, so this class is free to raise.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings
from pydantic_ai.models import Model

from engine.mechanics.outcomes import EpilogueContext, HexEvent, HexEventContext, OutcomeProvider
from infra.logger import get_logger
from .prompts import (
    EPILOGUE_SYSTEM_PROMPT,
    NARRATOR_SYSTEM_PROMPT,
    build_epilogue_prompt,
    build_hex_event_prompt,
)
from .registry import register_provider

log = get_logger(__name__)

DEFAULT_MODEL = "google-gla:gemini-2.0-flash"


class NarrativeOutput(BaseModel):
    narrative: str = Field(description="2-3 sentence story of what happened.")
    outcomes: Dict[str, float] = Field(
        default_factory=dict,
        description="Resource id -> amount found. Only valid resource ids, within the biome's yield ranges.",
        examples=[{"rations": 2, "salvage": 1}],
    )


@register_provider("llm")
class LLMNarrator(OutcomeProvider):
    """
    Narrator backed by a pydantic-ai model.

    Args:
        model: Model name (e.g. "google-gla:gemini-2.0-flash") or a pydantic-ai Model instance
        temperature: Sampling temperature
        max_tokens: Output token cap per call
    """

    name = "llm"

    def __init__(
            self,
            model: str | Model = DEFAULT_MODEL,
            temperature: float = 0.8,
            max_tokens: int = 300,
    ):
        self.model = model
        self.model_settings = ModelSettings(temperature=temperature, max_tokens=max_tokens)
        self._event_agent: Optional[Agent] = None
        self._epilogue_agent: Optional[Agent] = None

    @property
    def event_agent(self) -> Agent:
        if self._event_agent is None:
            self._event_agent = Agent(
                self.model,
                model_settings=self.model_settings,
                output_type=NarrativeOutput,
                instructions=NARRATOR_SYSTEM_PROMPT,
            )
        return self._event_agent

    @property
    def epilogue_agent(self) -> Agent:
        if self._epilogue_agent is None:
            self._epilogue_agent = Agent(
                self.model,
                model_settings=self.model_settings,
                output_type=str,
                instructions=EPILOGUE_SYSTEM_PROMPT,
            )
        return self._epilogue_agent

    async def generate_hex_event(self, context: HexEventContext) -> HexEvent:
        result = await self.event_agent.run(build_hex_event_prompt(context))
        output: NarrativeOutput = result.output
        log.debug("Narrated %s on %s for %s", context.action, context.biome, context.player_name)
        return HexEvent(narrative=output.narrative, outcomes=dict(output.outcomes))

    async def generate_epilogue(self, context: EpilogueContext) -> str:
        result = await self.epilogue_agent.run(build_epilogue_prompt(context))
        return result.output
