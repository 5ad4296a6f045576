"""Sources: content origins and their per-source configuration."""

from catalog_parsers.sources.config import SourcesConfig
from catalog_parsers.sources.keys import ConfigKey
from catalog_parsers.sources.repository import (
    ConfigStore,
    InMemoryConfigStore,
    JsonFileConfigStore,
    create_config_store,
)
from catalog_parsers.sources.schemas import ContentSource
from catalog_parsers.sources.service import ConfigRegistry, SourceConfig

__all__ = [
    "ConfigKey",
    "ConfigRegistry",
    "ConfigStore",
    "ContentSource",
    "InMemoryConfigStore",
    "JsonFileConfigStore",
    "SourceConfig",
    "SourcesConfig",
    "create_config_store",
]
