"""Persistent key/value storage for per-source configuration overrides."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from catalog_parsers.sources.config import SourcesConfig

logger = logging.getLogger(__name__)


class ConfigStore(ABC):
    """Storage backend for overrides, keyed by (source name, config key).

    Written by user-facing settings outside the parsers; read when a
    parser resolves a config value.
    """

    @abstractmethod
    def get(self, source_name: str, key: str) -> Any | None:
        """Return the stored override or None if unset."""
        ...

    @abstractmethod
    def set(self, source_name: str, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def remove(self, source_name: str, key: str) -> None:
        """Clear an override. Removing an unset key is a no-op."""
        ...


class InMemoryConfigStore(ConfigStore):
    """Process-local store, used when nothing needs to survive a restart."""

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None) -> None:
        self._data: dict[str, dict[str, Any]] = {
            name: dict(values) for name, values in (initial or {}).items()
        }
        self._lock = threading.Lock()

    def get(self, source_name: str, key: str) -> Any | None:
        with self._lock:
            return self._data.get(source_name, {}).get(key)

    def set(self, source_name: str, key: str, value: Any) -> None:
        with self._lock:
            self._data.setdefault(source_name, {})[key] = value

    def remove(self, source_name: str, key: str) -> None:
        with self._lock:
            values = self._data.get(source_name)
            if values is None:
                return
            values.pop(key, None)
            if not values:
                del self._data[source_name]


class JsonFileConfigStore(InMemoryConfigStore):
    """Store persisted as ``{"SOURCE_NAME": {"key": value}}`` in a JSON file.

    The file is read once at construction and rewritten on every change.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        super().__init__(self._load())

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config store {self._path} must contain a JSON object")
        logger.debug("Loaded overrides for %d sources from %s", len(data), self._path)
        return data

    def _dump(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2, sort_keys=True)
        tmp.replace(self._path)

    def set(self, source_name: str, key: str, value: Any) -> None:
        super().set(source_name, key, value)
        with self._lock:
            self._dump()

    def remove(self, source_name: str, key: str) -> None:
        super().remove(source_name, key)
        with self._lock:
            self._dump()


def create_config_store(config: SourcesConfig | None = None) -> ConfigStore:
    """Pick the store backend from settings."""
    config = config or SourcesConfig()
    if config.store_path is not None:
        logger.info("Using JSON config store at %s", config.store_path)
        return JsonFileConfigStore(config.store_path)
    return InMemoryConfigStore()
