"""
Narrative providers for the Meridian engine.

This module provides:
- LLMNarrator: pydantic-ai backed outcome provider
- create_provider / register_provider: Config-based provider lookup
- provider_from_settings: Build the provider selected by the environment
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .registry import (
    PROVIDER_REGISTRY,
    available_providers,
    create_provider,
    register_provider,
    resolve_provider_class,
)
from .llm import DEFAULT_MODEL, LLMNarrator, NarrativeOutput

if TYPE_CHECKING:
    from engine.mechanics.outcomes import OutcomeProvider
    from infra.settings import Settings


def provider_from_settings(settings: "Settings") -> Optional["OutcomeProvider"]:
    """
    The configured narrator, or None when MERIDIAN_NARRATOR=fallback.

    None lets the tick resolver use its deterministic fallback seeded from the
    world's random source.
    """
    if settings.narrator == "llm":
        return create_provider("llm", model=settings.narrator_model)
    return None


__all__ = [
    "PROVIDER_REGISTRY",
    "available_providers",
    "create_provider",
    "register_provider",
    "resolve_provider_class",
    "DEFAULT_MODEL",
    "LLMNarrator",
    "NarrativeOutput",
    "provider_from_settings",
]
