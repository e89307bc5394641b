from __future__ import annotations

import importlib
from typing import Callable, Dict, List, Type, TypeVar

from .base_agent import BaseAgent

# Bot kinds that simulation configs and the CLI can seat by name
AGENT_REGISTRY: Dict[str, Type[BaseAgent]] = {}
AgentType = TypeVar("AgentType", bound=Type[BaseAgent])


def register_agent(key: str, cls: AgentType | None = None) -> AgentType | Callable[[AgentType], AgentType]:
    """
    Make a bot class seatable under ``key``.

    Works as `@register_agent("random")` on the class or as
    `register_agent("random", RandomAgent)` afterwards. Re-registering a key
    replaces the previous class.
    """
    def decorator(target_cls: AgentType) -> AgentType:
        AGENT_REGISTRY[key] = target_cls
        return target_cls

    if cls is None:
        return decorator

    return decorator(cls)


def available_agents() -> List[str]:
    """Registered bot kinds, sorted for help texts and CLI choices."""
    return sorted(AGENT_REGISTRY)


def resolve_agent_class(type_ref: str) -> Type[BaseAgent]:
    """
    Look up a bot class by registered kind or by "package.module.Class" path.

    Raises:
        ValueError: Not registered and not a dotted path
        TypeError: The imported object is not a BaseAgent subclass
    """
    if type_ref in AGENT_REGISTRY:
        return AGENT_REGISTRY[type_ref]

    if "." not in type_ref:
        raise ValueError(
            f"Unknown agent type '{type_ref}'. "
            f"Registered: {', '.join(available_agents()) or 'none'}; "
            "or give an import path like 'pkg.module.Class'."
        )

    module_name, class_name = type_ref.rsplit(".", 1)
    cls = getattr(importlib.import_module(module_name), class_name)

    if not (isinstance(cls, type) and issubclass(cls, BaseAgent)):
        raise TypeError(f"{type_ref} is not a BaseAgent subclass")

    return cls
