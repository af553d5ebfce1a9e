"""Application settings, loaded from environment variables and/or a .env file."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from onelo.source import SourceId


class Settings(BaseSettings):
    """
    Settings for a onelo build.

    Every field can be set through an ``ONELO_``-prefixed environment variable,
    e.g. ``ONELO_CACHE_PATH=./cache.db``.
    """

    cache_path: Path = Field(default=Path("./onelo.db"))
    input_path: Path = Field(default=Path("./notes"))
    source_id: str = "unnamed"
    log_level: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="ONELO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("source_id")
    @classmethod
    def ensure_valid_source_id(cls, value: str) -> str:
        """Reject source identifiers containing the `:` separator."""
        SourceId.parse(value)
        return value


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh `Settings` instance; keyword arguments win over the environment."""
    return Settings(**overrides)
