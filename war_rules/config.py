"""Configuration loader for the war rules service.

Values come from environment variables prefixed with ``WAR_RULES_`` (or a
local ``.env`` file), parsed with Pydantic Settings.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """War rules configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WAR_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_timezone: str = "UTC"
    default_participation_status: str = "Signed Up"
    confirmed_status: str = "Confirmed"

    # Local hour at which a character's war day begins (0 = midnight).
    war_day_anchor_hour: int = Field(default=0, ge=0, le=23)

    log_level: str = "INFO"
    seed_sample_data: bool = False


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""
    return Settings()
