"""Configuration for the per-source config store."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SourcesConfig(BaseSettings):
    """Settings for where per-source overrides (domain mirrors, etc.) are kept."""

    model_config = SettingsConfigDict(
        env_prefix="SOURCES_",
        case_sensitive=False,
        extra="ignore",
    )

    store_path: Path | None = Field(
        default=None,
        description="JSON file holding per-source overrides (unset = in-memory only)",
    )
