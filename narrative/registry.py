"""
Named narrators.

Sessions pick their outcome provider from configuration (MERIDIAN_NARRATOR),
so every provider class is reachable by a short name. The deterministic
fallback is always present; the LLM narrator registers itself as "llm" when
`narrative.llm` is imported.
"""

from __future__ import annotations

import importlib
from typing import Any, Callable, Dict, List, Type, TypeVar

from engine.mechanics.outcomes import FallbackOutcomeProvider, OutcomeProvider

PROVIDER_REGISTRY: Dict[str, Type[OutcomeProvider]] = {
    "fallback": FallbackOutcomeProvider,
}
ProviderType = TypeVar("ProviderType", bound=Type[OutcomeProvider])


def register_provider(name: str, cls: ProviderType | None = None) -> ProviderType | Callable[[ProviderType], ProviderType]:
    """Expose a narrator class under ``name``; usable bare or as a class decorator."""
    def add(target_cls: ProviderType) -> ProviderType:
        PROVIDER_REGISTRY[name] = target_cls
        return target_cls

    return add if cls is None else add(cls)


def available_providers() -> List[str]:
    return sorted(PROVIDER_REGISTRY)


def resolve_provider_class(type_ref: str) -> Type[OutcomeProvider]:
    """
    Narrator class for a registered name or a "package.module.Class" path.

    Raises:
        ValueError: Unknown name
        TypeError: The path points at something that cannot narrate
    """
    cls = PROVIDER_REGISTRY.get(type_ref)
    if cls is not None:
        return cls

    module_name, _, class_name = type_ref.rpartition(".")
    if not module_name:
        raise ValueError(
            f"No narrator called '{type_ref}' (known: {', '.join(available_providers())})"
        )

    cls = getattr(importlib.import_module(module_name), class_name)
    if not (isinstance(cls, type) and issubclass(cls, OutcomeProvider)):
        raise TypeError(f"{type_ref} cannot narrate: not an OutcomeProvider")
    return cls


def create_provider(type_ref: str, **init_params: Any) -> OutcomeProvider:
    return resolve_provider_class(type_ref)(**init_params)
