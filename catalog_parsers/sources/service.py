"""Per-source configuration resolved lazily over a config store."""

import logging
import threading
from collections.abc import Iterable
from typing import Any

from catalog_parsers.sources.keys import ConfigKey
from catalog_parsers.sources.repository import ConfigStore, InMemoryConfigStore
from catalog_parsers.sources.schemas import ContentSource

logger = logging.getLogger(__name__)


class SourceConfig:
    """Config values of one source.

    Only keys declared by the source's parser can be read or written;
    anything else is a programming error and raises LookupError. Values
    are read through to the store on every access, so an override written
    elsewhere takes effect on the next call.
    """

    def __init__(self, source: ContentSource, store: ConfigStore) -> None:
        self._source = source
        self._store = store
        self._keys: dict[str, ConfigKey] = {}
        self._lock = threading.Lock()

    @property
    def source(self) -> ContentSource:
        return self._source

    @property
    def keys(self) -> tuple[ConfigKey, ...]:
        """Declared keys, in declaration order."""
        return tuple(self._keys.values())

    def declare(self, keys: Iterable[ConfigKey]) -> None:
        """Register keys; redeclaring a key name replaces its descriptor."""
        with self._lock:
            for key in keys:
                self._keys[key.key] = key

    def __contains__(self, key: ConfigKey) -> bool:
        return key.key in self._keys

    def __getitem__(self, key: ConfigKey) -> Any:
        self._require_declared(key)
        value = self._store.get(self._source.name, key.key)
        if value is None:
            return key.default_value
        return value

    def __setitem__(self, key: ConfigKey, value: Any) -> None:
        self._require_declared(key)
        self._store.set(self._source.name, key.key, key.validate(value))
        logger.debug("Config %s.%s overridden", self._source.name, key.key)

    def reset(self, key: ConfigKey) -> None:
        """Drop the override so the key's default applies again."""
        self._require_declared(key)
        self._store.remove(self._source.name, key.key)

    def _require_declared(self, key: ConfigKey) -> None:
        if key.key not in self._keys:
            raise LookupError(
                f"Config key {key.key!r} is not declared for {self._source.name}"
            )

    def __repr__(self) -> str:
        return f"SourceConfig(source={self._source.name}, keys={list(self._keys)})"


class ConfigRegistry:
    """Owns one SourceConfig per source, created on first access.

    Creation is serialized so concurrent first lookups of the same source
    all observe a single instance.
    """

    def __init__(self, store: ConfigStore | None = None) -> None:
        self._store = store or InMemoryConfigStore()
        self._configs: dict[ContentSource, SourceConfig] = {}
        self._lock = threading.Lock()

    @property
    def store(self) -> ConfigStore:
        return self._store

    def get_or_create(self, source: ContentSource) -> SourceConfig:
        config = self._configs.get(source)
        if config is not None:
            return config
        with self._lock:
            config = self._configs.get(source)
            if config is None:
                config = SourceConfig(source, self._store)
                self._configs[source] = config
                logger.debug("Created config for %s", source.name)
            return config

    def invalidate(self, source: ContentSource | None = None) -> None:
        """Forget cached configs (all of them when source is None)."""
        with self._lock:
            if source is None:
                self._configs.clear()
            else:
                self._configs.pop(source, None)
