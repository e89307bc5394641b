"""
Environment-driven settings for the simulation services.

Values come from MERIDIAN_* environment variables or the project's `.env`
file. The same file is also loaded into the process environment so that
model provider keys (GEMINI_API_KEY, OPENAI_API_KEY, ...) reach pydantic-ai.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .paths import ENV_FILE


class Settings(BaseSettings):
    """Runtime knobs that are not game balance (see GameRules for that)."""

    model_config = SettingsConfigDict(env_prefix="MERIDIAN_", env_file=ENV_FILE, extra="ignore")

    log_level: str = Field(default="INFO", description="Root logging level.")
    log_json: bool = Field(default=False, description="Emit JSON log lines.")
    narrator: Literal["fallback", "llm"] = Field(
        default="fallback",
        description="Outcome provider used by sessions: deterministic fallback or LLM.",
    )
    narrator_model: str = Field(
        default="google-gla:gemini-2.0-flash",
        description="pydantic-ai model identifier for the LLM narrator.",
    )
    narrator_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for one narrator call."
    )
    tick_interval_seconds: int = Field(
        default=12 * 60 * 60, gt=0, description="Wall-clock time between ticks."
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    load_dotenv(ENV_FILE)
    return Settings()
