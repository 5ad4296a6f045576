"""Pytest fixtures for catalog-parsers tests."""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from prometheus_client import CollectorRegistry

from catalog_parsers.observability.metrics import ParserMetrics
from catalog_parsers.parsers.base_parser import ContentParser
from catalog_parsers.parsers.http_client import CookieJar, HTTPClientError, LoaderContext
from catalog_parsers.parsers.paginator import Paginator
from catalog_parsers.parsers.schemas import (
    ContentChapter,
    ContentItem,
    ContentPage,
    ContentTag,
    SortOrder,
)
from catalog_parsers.sources.keys import Domain
from catalog_parsers.sources.repository import InMemoryConfigStore
from catalog_parsers.sources.schemas import ContentSource
from catalog_parsers.sources.service import ConfigRegistry


class FakeLoaderContext(LoaderContext):
    """Loader context answering from a url -> body mapping."""

    def __init__(self, config_registry: ConfigRegistry | None = None):
        super().__init__(config_registry)
        self.responses: dict[str, tuple[int, str]] = {}
        self.requests: list[tuple[str, str, Any]] = []
        self._cookie_jar = CookieJar()

    @property
    def cookie_jar(self) -> CookieJar:
        return self._cookie_jar

    def add_text(self, url: str, text: str, status: int = 200) -> None:
        self.responses[url] = (status, text)

    def add_json(self, url: str, payload: Any, status: int = 200) -> None:
        self.responses[url] = (status, json.dumps(payload))

    def _respond(self, method: str, url: str) -> httpx.Response:
        if url not in self.responses:
            raise HTTPClientError(f"Request to {url} failed with status 404", status_code=404)
        status, body = self.responses[url]
        if status >= 400:
            raise HTTPClientError(f"Request to {url} failed with status {status}", status_code=status)
        return httpx.Response(status, text=body, request=httpx.Request(method, url))

    async def http_get(self, url, headers=None):
        self.requests.append(("GET", url, headers))
        return self._respond("GET", url)

    async def http_post(self, url, form=None, json_body=None, headers=None):
        self.requests.append(("POST", url, json_body if json_body is not None else form))
        return self._respond("POST", url)


class DummyParser(ContentParser):
    """Parser over a fake catalog of 45 items served in pages of 10."""

    sort_orders = (SortOrder.UPDATED, SortOrder.POPULARITY)
    config_key_domain = Domain("dummy.example.org", presets=("mirror.example.org",))

    TOTAL = 45
    PAGE_SIZE = 10

    def __init__(self, context: LoaderContext, metrics: ParserMetrics | None = None):
        super().__init__(context, ContentSource.DUMMY, metrics=metrics)
        self.paginator = Paginator(self.PAGE_SIZE)
        self.list_calls: list[tuple] = []

    def make_item(self, n: int) -> ContentItem:
        url = f"/item/{n}"
        return ContentItem(
            id=self.generate_uid(url),
            url=url,
            public_url=self.to_absolute_url(url),
            title=f"Item {n}",
            source=self.source,
        )

    async def _get_list(self, offset, query, tags, sort_order):
        self.list_calls.append((offset, query, tags, sort_order))
        page = self.paginator.page_for(offset)
        start = (page - 1) * self.PAGE_SIZE
        items = [self.make_item(n) for n in range(start, min(start + self.PAGE_SIZE, self.TOTAL))]
        self.paginator.record_page(offset, page, len(items))
        return items

    async def _get_details(self, item):
        return item.copy_with(
            description="details",
            chapters=[
                ContentChapter(
                    id=self.generate_uid(f"{item.url}/1"),
                    name="Chapter 1",
                    number=1,
                    url=f"{item.url}/1",
                    source=self.source,
                )
            ],
        )

    async def _get_pages(self, chapter):
        return [
            ContentPage(id=self.generate_uid(f"{chapter.url}/p{i}"), url=f"{chapter.url}/p{i}", source=self.source)
            for i in range(3)
        ]

    async def _get_tags(self):
        return {ContentTag(title="Action", key="action", source=self.source)}


@pytest.fixture
def config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def config_registry(config_store: InMemoryConfigStore) -> ConfigRegistry:
    return ConfigRegistry(config_store)


@pytest.fixture
def loader_context(config_registry: ConfigRegistry) -> FakeLoaderContext:
    return FakeLoaderContext(config_registry)


@pytest.fixture
def metrics() -> ParserMetrics:
    """Metrics on a private registry so tests can read exact values."""
    return ParserMetrics(registry=CollectorRegistry())


@pytest.fixture
def dummy_parser(loader_context: FakeLoaderContext, metrics: ParserMetrics) -> DummyParser:
    return DummyParser(loader_context, metrics=metrics)


@pytest.fixture
def domain_key() -> Domain:
    """Domain key with one mirror."""
    return Domain("manga-chan.me", presets=("manga-chan.me", "mangachan.me"))


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """A JSON store file holding one override."""
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({"MANGACHAN": {"domain": "mangachan.me"}}), encoding="utf-8")
    return path


@pytest.fixture
def sample_item(dummy_parser: DummyParser) -> ContentItem:
    return dummy_parser.make_item(1)
