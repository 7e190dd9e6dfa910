"""Registry configuration via pydantic-settings.

Reads from .env file or environment variables prefixed with ``ESCROW_``.
All settings are validated at startup; an invalid value fails fast with a
clear error message.

Usage:
    from escrow_custody.config import get_settings
    settings = get_settings()
    print(settings.log_level)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the escrow registry."""

    model_config = SettingsConfigDict(
        env_prefix="ESCROW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    json_logs: bool = False

    # --- Settlement ---
    # Simulated transfers generate fake references and never fail.
    simulate_transfers: bool = True

    # --- Creation policy ---
    # Both off by default: parties may overlap and descriptions are unbounded.
    enforce_distinct_parties: bool = False
    max_description_length: int | None = Field(default=None, ge=0)

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the registry settings."""
    return Settings()
