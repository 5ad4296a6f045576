"""Tests for SourceConfig and ConfigRegistry."""

import threading
from pathlib import Path

import pytest

from catalog_parsers.sources.keys import Domain, UserAgent
from catalog_parsers.sources.repository import InMemoryConfigStore, JsonFileConfigStore
from catalog_parsers.sources.schemas import ContentSource
from catalog_parsers.sources.service import ConfigRegistry, SourceConfig


@pytest.fixture
def source_config(config_store: InMemoryConfigStore, domain_key: Domain) -> SourceConfig:
    config = SourceConfig(ContentSource.MANGACHAN, config_store)
    config.declare([domain_key])
    return config


class TestSourceConfig:
    """Tests for value resolution of one source."""

    def test_default_when_unset(self, source_config: SourceConfig, domain_key: Domain) -> None:
        assert source_config[domain_key] == "manga-chan.me"

    def test_override_read_through(
        self, source_config: SourceConfig, config_store: InMemoryConfigStore, domain_key: Domain
    ) -> None:
        config_store.set("MANGACHAN", "domain", "mangachan.me")
        assert source_config[domain_key] == "mangachan.me"

    def test_set_and_reset(self, source_config: SourceConfig, domain_key: Domain) -> None:
        source_config[domain_key] = "mangachan.me"
        assert source_config[domain_key] == "mangachan.me"

        source_config.reset(domain_key)
        assert source_config[domain_key] == "manga-chan.me"

    def test_set_validates(self, source_config: SourceConfig, domain_key: Domain) -> None:
        with pytest.raises(ValueError):
            source_config[domain_key] = "   "
        assert source_config[domain_key] == "manga-chan.me"

    def test_set_strips(self, source_config: SourceConfig, domain_key: Domain) -> None:
        source_config[domain_key] = " mangachan.me "
        assert source_config[domain_key] == "mangachan.me"

    def test_undeclared_key(self, source_config: SourceConfig) -> None:
        agent = UserAgent("Agent/1.0")
        assert agent not in source_config
        with pytest.raises(LookupError):
            source_config[agent]
        with pytest.raises(LookupError):
            source_config[agent] = "Other/2.0"
        with pytest.raises(LookupError):
            source_config.reset(agent)

    def test_redeclare_replaces_descriptor(self, source_config: SourceConfig) -> None:
        source_config.declare([Domain("mangachan.me")])
        assert len(source_config.keys) == 1
        assert source_config[Domain("mangachan.me")] == "mangachan.me"

    def test_sources_isolated(self, config_store: InMemoryConfigStore, domain_key: Domain) -> None:
        manga = SourceConfig(ContentSource.MANGACHAN, config_store)
        yaoi = SourceConfig(ContentSource.YAOICHAN, config_store)
        manga.declare([domain_key])
        yaoi.declare([Domain("yaoi-chan.me")])

        manga[domain_key] = "mangachan.me"

        assert yaoi[Domain("yaoi-chan.me")] == "yaoi-chan.me"

    def test_persisted_override(self, store_file: Path, domain_key: Domain) -> None:
        config = SourceConfig(ContentSource.MANGACHAN, JsonFileConfigStore(store_file))
        config.declare([domain_key])
        assert config[domain_key] == "mangachan.me"


class TestConfigRegistry:
    """Tests for ConfigRegistry."""

    def test_same_instance_per_source(self, config_registry: ConfigRegistry) -> None:
        first = config_registry.get_or_create(ContentSource.MANGACHAN)
        second = config_registry.get_or_create(ContentSource.MANGACHAN)
        assert first is second
        assert first.source is ContentSource.MANGACHAN

    def test_distinct_per_source(self, config_registry: ConfigRegistry) -> None:
        assert config_registry.get_or_create(ContentSource.MANGACHAN) is not config_registry.get_or_create(
            ContentSource.YAOICHAN
        )

    def test_concurrent_first_access(self, config_registry: ConfigRegistry) -> None:
        results: list[SourceConfig] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            results.append(config_registry.get_or_create(ContentSource.COMICK_FUN))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_invalidate(self, config_registry: ConfigRegistry) -> None:
        first = config_registry.get_or_create(ContentSource.MANGACHAN)
        other = config_registry.get_or_create(ContentSource.YAOICHAN)

        config_registry.invalidate(ContentSource.MANGACHAN)

        assert config_registry.get_or_create(ContentSource.MANGACHAN) is not first
        assert config_registry.get_or_create(ContentSource.YAOICHAN) is other

        config_registry.invalidate()
        assert config_registry.get_or_create(ContentSource.YAOICHAN) is not other

    def test_overrides_survive_invalidate(self, config_registry: ConfigRegistry, domain_key: Domain) -> None:
        config = config_registry.get_or_create(ContentSource.MANGACHAN)
        config.declare([domain_key])
        config[domain_key] = "mangachan.me"

        config_registry.invalidate()
        fresh = config_registry.get_or_create(ContentSource.MANGACHAN)
        fresh.declare([domain_key])

        assert fresh[domain_key] == "mangachan.me"

    def test_default_store(self) -> None:
        assert isinstance(ConfigRegistry().store, InMemoryConfigStore)
