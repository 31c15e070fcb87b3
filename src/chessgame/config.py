"""Centralized application configuration.

Settings are read from environment variables (or a .env.chess file). Only
the HTTP surface and the CLI read them; the engine functions take their
options as arguments.
"""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env.chess", env_file_encoding="utf-8", extra="ignore",
    )

    # Computer opponent
    difficulty: str = "medium"
    ai_seed: int | None = None
    ai_candidate_pool: int | None = None   # overrides the difficulty profile's pool

    log_level: str = "INFO"


def configure_logging(settings: Settings, stream=None) -> None:
    """Give the root logger a handler and the configured level."""
    level = settings.log_level.upper()
    logging.basicConfig(level=level, stream=stream)
    # basicConfig leaves the level alone when a handler is already attached.
    logging.getLogger().setLevel(level)
