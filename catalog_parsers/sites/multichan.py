"""
Parsers for the "*-chan" family of sites.

They share one DataLife Engine based layout; only the domain and the
chapter table markup differ between them.
"""

import logging

from bs4 import BeautifulSoup, Tag

from catalog_parsers.parsers.base_parser import AuthProvider, ContentParser
from catalog_parsers.parsers.dates import parse_date_millis
from catalog_parsers.parsers.exceptions import AuthRequiredError
from catalog_parsers.parsers.html import (
    attr_as_absolute_url_or_none,
    attr_as_relative_url,
    attr_as_relative_url_or_none,
    host_of,
    require_element_by_id,
)
from catalog_parsers.parsers.http_client import parse_html
from catalog_parsers.parsers.registry import source_parser
from catalog_parsers.parsers.schemas import (
    ContentChapter,
    ContentItem,
    ContentPage,
    ContentTag,
    SortOrder,
)
from catalog_parsers.parsers.urls import to_absolute_url, to_relative_url, url_encoded
from catalog_parsers.sources.keys import Domain
from catalog_parsers.sources.schemas import ContentSource

logger = logging.getLogger(__name__)

SESSION_COOKIE = "dle_user_id"

_SORT_PATHS = {
    SortOrder.ALPHABETICAL: "catalog",
    SortOrder.POPULARITY: "mostfavorites",
    SortOrder.NEWEST: "manga/new",
}

_TAG_SORT_KEYS = {
    SortOrder.ALPHABETICAL: "abcasc",
    SortOrder.POPULARITY: "favdesc",
    SortOrder.NEWEST: "datedesc",
}


class ChanParser(ContentParser, AuthProvider):
    """Shared implementation; subclasses provide source and domain."""

    @property
    def sort_orders(self) -> tuple[SortOrder, ...]:
        return (SortOrder.NEWEST, SortOrder.POPULARITY, SortOrder.ALPHABETICAL)

    @property
    def auth_url(self) -> str:
        return f"https://{self.domain}"

    @property
    def is_authorized(self) -> bool:
        return SESSION_COOKIE in self.context.cookie_jar.get_cookies(self.domain)

    async def _get_list(
        self,
        offset: int,
        query: str | None,
        tags: frozenset[ContentTag] | None,
        sort_order: SortOrder,
    ) -> list[ContentItem]:
        domain = self.domain
        if query:
            # Search results come on a single page
            if offset != 0:
                return []
            url = f"https://{domain}/?do=search&subaction=search&story={url_encoded(query)}"
        elif tags:
            keys = "+".join(sorted(tag.key for tag in tags))
            url = f"https://{domain}/tags/{keys}&n={_TAG_SORT_KEYS.get(sort_order, 'favdesc')}?offset={offset}"
        else:
            url = f"https://{domain}/{_SORT_PATHS.get(sort_order, 'mostfavorites')}?offset={offset}"

        doc = parse_html(await self.http_get(url))
        main = doc.select_one("body div.main_fon")
        root = main.find(id="content") if main is not None else None
        if root is None:
            self.parse_failed("Cannot find root", url)

        items = []
        for row in root.select("div.content_row"):
            a = row.select_one("div.manga_row1 h2 a")
            if a is None:
                continue
            href = attr_as_relative_url(a, "href")
            author = row.select_one('a[href^="/mangaka"]')
            cover = row.select_one("div.manga_images img")
            items.append(
                ContentItem(
                    id=self.generate_uid(href),
                    url=href,
                    public_url=to_absolute_url(href, host_of(a) or domain),
                    alt_title=a.get("title"),
                    title=a.get_text().rsplit("(", 1)[-1].rsplit(")", 1)[0],
                    author=author.get_text() if author is not None else None,
                    cover_url=(attr_as_absolute_url_or_none(cover, "src") if cover is not None else None) or "",
                    tags=frozenset(
                        ContentTag(
                            title=_to_tag_name(tag.get_text()),
                            key=url_encoded(tag.get("href", "").rsplit("/", 1)[-1]),
                            source=self.source,
                        )
                        for tag in row.select("div.genre a")
                    ),
                    source=self.source,
                )
            )
        return items

    async def _get_details(self, item: ContentItem) -> ContentItem:
        doc = parse_html(await self.http_get(self.to_absolute_url(item.url)))
        root = require_element_by_id(doc, "dle-content")
        cover = root.find(id="cover")
        return item.copy_with(
            description=_description_of(root),
            large_cover_url=attr_as_absolute_url_or_none(cover, "src") if cover is not None else None,
            chapters=self._parse_chapters(root),
        )

    def _parse_chapters(self, root: Tag) -> tuple[ContentChapter, ...]:
        chapters = []
        # The first two rows are headers, the list is newest first
        for tr in reversed(root.select("table.table_cha tr")[2:]):
            a = tr.select_one("a")
            href = attr_as_relative_url_or_none(a, "href") if a is not None else None
            if href is None:
                continue
            date = tr.select_one("div.date")
            chapters.append(
                ContentChapter(
                    id=self.generate_uid(href),
                    name=a.get_text(),
                    number=len(chapters) + 1,
                    url=href,
                    upload_date=parse_date_millis(date.get_text() if date is not None else None),
                    source=self.source,
                )
            )
        return tuple(chapters)

    async def _get_pages(self, chapter: ContentChapter) -> list[ContentPage]:
        full_url = self.to_absolute_url(chapter.url)
        doc = parse_html(await self.http_get(full_url))
        domain = self.domain
        for script in doc.select("script"):
            data = script.get_text()
            pos = data.find('"fullimg')
            if pos == -1:
                continue
            chunk = data[pos:]
            chunk = chunk.split("[", 1)[-1].split(";", 1)[0].rsplit("]", 1)[0]
            urls = [to_relative_url(part.strip().strip("\"'"), domain) for part in chunk.split(",")]
            pages = [
                ContentPage(
                    id=self.generate_uid(url),
                    url=url,
                    referer=full_url,
                    source=self.source,
                )
                for url in urls
                if url.strip()
            ]
            logger.debug(f"Found {len(pages)} pages in {chapter.url}")
            return pages
        self.parse_failed(f"Pages list not found at {chapter.url}", full_url)

    async def _get_tags(self) -> set[ContentTag]:
        url = f"https://{self.domain}/mostfavorites&sort=manga"
        doc = parse_html(await self.http_get(url))
        main = doc.select_one("body div.main_fon")
        side = main.find(id="side") if main is not None else None
        lists = side.select("ul") if side is not None else []
        if not lists:
            self.parse_failed("Cannot find root", url)
        tags = set()
        for li in lists[-1].select("li.sidetag"):
            children = li.find_all(recursive=False)
            if not children:
                self.parse_failed("Tag link is missing", url)
            a = children[-1]
            tags.add(
                ContentTag(
                    title=_to_tag_name(a.get_text()),
                    key=a.get("href", "").rsplit("/", 1)[-1],
                    source=self.source,
                )
            )
        return tags

    async def get_username(self) -> str:
        doc = parse_html(await self.http_get(f"https://{self.domain}"))
        root = require_element_by_id(doc, "top_user")
        a = root.select_one('a[href*="/user/"]')
        if a is None:
            raise AuthRequiredError(self.source)
        return a["href"].rstrip("/").rsplit("/", 1)[-1]


@source_parser(ContentSource.MANGACHAN)
class MangaChanParser(ChanParser):
    def __init__(self, context):
        super().__init__(context, ContentSource.MANGACHAN)

    @property
    def config_key_domain(self) -> Domain:
        return Domain("manga-chan.me", presets=("manga-chan.me", "mangachan.me"))


@source_parser(ContentSource.YAOICHAN)
class YaoiChanParser(ChanParser):
    """Yaoi-chan lists chapters as plain links instead of dated table rows."""

    def __init__(self, context):
        super().__init__(context, ContentSource.YAOICHAN)

    @property
    def config_key_domain(self) -> Domain:
        return Domain("yaoi-chan.me")

    def _parse_chapters(self, root: Tag) -> tuple[ContentChapter, ...]:
        links = [
            a
            for div in root.select("table.table_cha div.manga")
            if (a := div.select_one("a")) is not None
        ]
        chapters = []
        for a in reversed(links):
            href = attr_as_relative_url(a, "href")
            chapters.append(
                ContentChapter(
                    id=self.generate_uid(href),
                    name=a.get_text().strip(),
                    number=len(chapters) + 1,
                    url=href,
                    source=self.source,
                )
            )
        return tuple(chapters)


def _to_tag_name(text: str) -> str:
    name = text.replace("_", " ").strip()
    return name[:1].upper() + name[1:]


def _description_of(root: Tag | BeautifulSoup) -> str | None:
    description = root.find(id="description")
    if description is None:
        return None
    return description.decode_contents().rsplit("<div", 1)[0].strip()
