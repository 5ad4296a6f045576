"""
Base parser interface and shared functionality for site parsers.

Each site parser must implement the abstract operations below. The base
class provides:
- Argument checks and default sort order for listings
- Identity stability check for details
- Per-source config declaration and domain resolution
- Entity id generation
- Logging and metrics around every operation
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from functools import cached_property
from typing import NoReturn

import httpx

from catalog_parsers.observability.metrics import ParserMetrics, get_metrics
from catalog_parsers.parsers.exceptions import AuthRequiredError, ParseError
from catalog_parsers.parsers.favicons import Favicon, FaviconSet
from catalog_parsers.parsers.html import attr_as_absolute_url_or_none
from catalog_parsers.parsers.http_client import LoaderContext, parse_html
from catalog_parsers.parsers.identity import generate_uid
from catalog_parsers.parsers.schemas import (
    ContentChapter,
    ContentItem,
    ContentPage,
    ContentTag,
    SortOrder,
)
from catalog_parsers.parsers.urls import to_absolute_url
from catalog_parsers.sources.keys import ConfigKey, Domain, UserAgent
from catalog_parsers.sources.schemas import ContentSource
from catalog_parsers.sources.service import SourceConfig

logger = logging.getLogger(__name__)

_ICON_RELS = frozenset({
    "icon",
    "shortcut icon",
    "apple-touch-icon",
    "apple-touch-icon-precomposed",
    "mask-icon",
})


class ContentParser(ABC):
    """
    Abstract base class for site parsers.

    Subclasses must implement:
        - sort_orders: supported orders, the first one is the default
        - config_key_domain: default domain and its mirrors
        - _get_list(), _get_details(), _get_pages(), _get_tags()

    Subclasses may override:
        - get_page_url(): when the direct image link needs another request
        - get_favicon_url()
        - on_create_config(): to declare more config keys (call super)

    Never hardcode a domain in requests: use ``domain`` or
    ``to_absolute_url()`` so a mirror chosen by the user applies everywhere.
    """

    def __init__(
        self,
        context: LoaderContext,
        source: ContentSource,
        metrics: ParserMetrics | None = None,
    ):
        self.context = context
        self.source = source
        self._metrics = metrics or get_metrics()

    @property
    @abstractmethod
    def sort_orders(self) -> tuple[SortOrder, ...]:
        """Supported sort orders. Must not be empty."""
        ...

    @property
    @abstractmethod
    def config_key_domain(self) -> Domain:
        """Default domain and available alternatives."""
        ...

    # ── Config ──────────────────────────────────────────────────────────

    @cached_property
    def config(self) -> SourceConfig:
        config = self.context.get_config(self.source)
        keys: list[ConfigKey] = []
        self.on_create_config(keys)
        config.declare(keys)
        return config

    def on_create_config(self, keys: list[ConfigKey]) -> None:
        """Declare config keys. Overrides must call super()."""
        keys.append(self.config_key_domain)

    @property
    def domain(self) -> str:
        """Currently active domain of the source."""
        return self.config[self.config_key_domain]

    def get_request_headers(self) -> dict[str, str]:
        """Extra headers every request of this source needs."""
        for key in self.config.keys:
            if isinstance(key, UserAgent):
                return {"User-Agent": self.config[key]}
        return {}

    @property
    def default_sort_order(self) -> SortOrder:
        orders = tuple(self.sort_orders)
        if not orders:
            raise RuntimeError(f"{type(self).__name__}.sort_orders should have at least one value")
        return orders[0]

    # ── Operations ──────────────────────────────────────────────────────

    async def get_list(
        self,
        offset: int,
        query: str | None = None,
        tags: Iterable[ContentTag] | None = None,
        sort_order: SortOrder | None = None,
    ) -> list[ContentItem]:
        """
        List items by the given criteria.

        Args:
            offset: Number of items to skip, starting from 0. Not necessarily
                a multiple of the site's page size.
            query: Search query, None or empty for no search
            tags: Tags to filter by, values from get_tags() or ContentItem.tags
            sort_order: One of sort_orders, None for the default

        Returns:
            Items of the requested window, possibly empty
        """
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        if sort_order is None:
            sort_order = self.default_sort_order
        elif sort_order not in self.sort_orders:
            raise ValueError(f"{sort_order} is not supported by {self.source.name}")
        async with self._track("list"):
            return await self._get_list(
                offset,
                query or None,
                frozenset(tags) if tags else None,
                sort_order,
            )

    async def search(self, offset: int, query: str | None) -> list[ContentItem]:
        """List search results in the default order."""
        return await self.get_list(offset, query=query)

    async def get_list_by_tags(
        self,
        offset: int,
        tags: Iterable[ContentTag] | None,
        sort_order: SortOrder | None = None,
    ) -> list[ContentItem]:
        """List items of the given tags (or all items when tags is empty)."""
        return await self.get_list(offset, tags=tags, sort_order=sort_order)

    async def get_details(self, item: ContentItem) -> ContentItem:
        """
        Load details of an item: chapters, description, large cover, etc.

        The result describes the same item: id, url and source never change.
        """
        async with self._track("details"):
            details = await self._get_details(item)
            if (details.id, details.url, details.source) != (item.id, item.url, item.source):
                raise RuntimeError(
                    f"{type(self).__name__}.get_details() changed the identity of {item.url}"
                )
        return details

    async def get_pages(self, chapter: ContentChapter) -> list[ContentPage]:
        """List the pages of a chapter."""
        async with self._track("pages"):
            return await self._get_pages(chapter)

    async def get_tags(self) -> set[ContentTag]:
        """List available tags (genres) of the source."""
        async with self._track("tags"):
            return await self._get_tags()

    async def get_page_url(self, page: ContentPage) -> str:
        """Direct link to the page image."""
        return self.to_absolute_url(page.url)

    def get_favicon_url(self) -> str:
        """Direct link to the website favicon."""
        return f"https://{self.domain}/favicon.ico"

    async def get_favicons(self) -> FaviconSet:
        """Discover the icons the site root page links to."""
        root_url = f"https://{self.domain}/"
        async with self._track("favicons"):
            doc = parse_html(await self.http_get(root_url))
        icons: dict[str, Favicon] = {}
        for link in doc.select("link[rel][href]"):
            rel = link.get("rel")
            rel = (" ".join(rel) if isinstance(rel, list) else rel).lower()
            if rel not in _ICON_RELS:
                continue
            url = attr_as_absolute_url_or_none(link, "href")
            if url is None or url in icons:
                continue
            icons[url] = Favicon(url=url, size=_parse_icon_size(link.get("sizes")), rel=rel)
        default_url = self.get_favicon_url()
        icons.setdefault(default_url, Favicon(url=default_url, size=0, rel=None))
        return FaviconSet(icons.values(), referer=root_url)

    # ── To implement ────────────────────────────────────────────────────

    @abstractmethod
    async def _get_list(
        self,
        offset: int,
        query: str | None,
        tags: frozenset[ContentTag] | None,
        sort_order: SortOrder,
    ) -> list[ContentItem]:
        """
        Fetch one window of the catalog.

        Arguments are already checked: sort_order is one of sort_orders,
        query and tags are None when unset. Parsers of sites that paginate
        by page number translate offset with a Paginator.
        """
        ...

    @abstractmethod
    async def _get_details(self, item: ContentItem) -> ContentItem:
        ...

    @abstractmethod
    async def _get_pages(self, chapter: ContentChapter) -> list[ContentPage]:
        ...

    @abstractmethod
    async def _get_tags(self) -> set[ContentTag]:
        ...

    # ── Utils ───────────────────────────────────────────────────────────

    async def http_get(self, url: str) -> httpx.Response:
        """GET through the loader context with the source's request headers."""
        return await self.context.http_get(url, headers=self.get_request_headers() or None)

    def generate_uid(self, value: str | int) -> int:
        """
        Create an id for an item, chapter or page of this source.

        Args:
            value: Relative url (without domain) or a numeric id
        """
        return generate_uid(self.source, value)

    def to_absolute_url(self, url: str, subdomain: str | None = None) -> str:
        """
        Convert a relative url to an absolute one on the active domain.

        Args:
            url: Relative url
            subdomain: Host prefix such as a CDN ("img" -> img.example.org);
                a leading "www." of the domain is dropped first
        """
        domain = self.domain
        if subdomain is not None:
            domain = f"{subdomain}.{domain.removeprefix('www.')}"
        return to_absolute_url(url, domain)

    def parse_failed(self, message: str | None = None, url: str | None = None) -> NoReturn:
        raise ParseError(message, url)

    @asynccontextmanager
    async def _track(self, operation: str) -> AsyncIterator[None]:
        start = time.monotonic()
        status = "success"
        try:
            yield
        except ParseError as e:
            status = "parse_error"
            logger.warning(f"{self.source.name} {operation} failed to parse: {e}")
            raise
        except AuthRequiredError:
            status = "auth_required"
            raise
        except asyncio.CancelledError:
            status = "cancelled"
            raise
        except Exception as e:
            status = "error"
            logger.error(f"{self.source.name} {operation} failed: {type(e).__name__}: {e}")
            raise
        finally:
            elapsed = time.monotonic() - start
            self._metrics.record_operation(self.source, operation, status, elapsed)
            logger.debug(f"{self.source.name} {operation} {status} in {elapsed:.2f}s")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source.name})"


class AuthProvider(ABC):
    """Mixin for parsers of sites with user accounts."""

    @property
    @abstractmethod
    def auth_url(self) -> str:
        """Page where the user logs in."""
        ...

    @property
    @abstractmethod
    def is_authorized(self) -> bool:
        """Whether the loader context holds a session for the site."""
        ...

    @abstractmethod
    async def get_username(self) -> str:
        """Name of the logged-in user; raises AuthRequiredError without a session."""
        ...


def _parse_icon_size(sizes: str | list[str] | None) -> int:
    """Largest edge of a ``sizes`` attribute ("16x16 32x32" -> 32); 0 if unknown."""
    if not sizes:
        return 0
    if isinstance(sizes, list):
        sizes = " ".join(sizes)
    best = 0
    for token in sizes.lower().split():
        width, sep, height = token.partition("x")
        if sep and width.isdigit() and height.isdigit():
            best = max(best, int(width), int(height))
    return best
