"""
ComicK parser.

Uses the JSON API on the ``api.`` subdomain:
https://api.comick.fun/docs/static/index.html
"""

import logging
from typing import Any
from urllib.parse import urlencode

from catalog_parsers.parsers.base_parser import ContentParser
from catalog_parsers.parsers.dates import parse_date_millis
from catalog_parsers.parsers.http_client import LoaderContext, parse_json, parse_json_array
from catalog_parsers.parsers.lazy import AsyncLazy
from catalog_parsers.parsers.paginator import Paginator
from catalog_parsers.parsers.registry import source_parser
from catalog_parsers.parsers.schemas import (
    RATING_UNKNOWN,
    ContentChapter,
    ContentItem,
    ContentPage,
    ContentState,
    ContentTag,
    SortOrder,
)
from catalog_parsers.sources.keys import Domain
from catalog_parsers.sources.schemas import ContentSource

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
CHAPTERS_LIMIT = 99999

_SORT_KEYS = {
    SortOrder.POPULARITY: "view",
    SortOrder.RATING: "rating",
    SortOrder.UPDATED: "uploaded",
}


@source_parser(ContentSource.COMICK_FUN)
class ComickParser(ContentParser):
    """Parser for comick.fun."""

    def __init__(self, context: LoaderContext):
        super().__init__(context, ContentSource.COMICK_FUN)
        self._paginator = Paginator(PAGE_SIZE)
        # genre id -> tag, listings reference genres by id only
        self._tags = AsyncLazy(self._load_tags)

    @property
    def sort_orders(self) -> tuple[SortOrder, ...]:
        return (SortOrder.POPULARITY, SortOrder.UPDATED, SortOrder.RATING)

    @property
    def config_key_domain(self) -> Domain:
        return Domain("comick.fun")

    @property
    def api_url(self) -> str:
        return self.to_absolute_url("/", subdomain="api").rstrip("/")

    async def _get_list(
        self,
        offset: int,
        query: str | None,
        tags: frozenset[ContentTag] | None,
        sort_order: SortOrder,
    ) -> list[ContentItem]:
        params: list[tuple[str, Any]] = [("tachiyomi", "true")]
        page = None
        if query:
            # Search is not paginated
            if offset > 0:
                return []
            params.append(("q", query))
        else:
            page = self._paginator.page_for(offset)
            params += [("limit", PAGE_SIZE), ("page", page)]
            params += [("genres", tag.key) for tag in sorted(tags or (), key=lambda t: t.key)]
            params.append(("sort", _SORT_KEYS.get(sort_order, "uploaded")))

        url = f"{self.api_url}/search?{urlencode(params)}"
        ja = parse_json_array(await self.http_get(url))
        tags_map = await self._tags.get()
        items = [self._parse_item(jo, tags_map, url) for jo in ja]
        if page is not None:
            self._paginator.record_page(offset, page, len(items))
        return items

    async def _get_details(self, item: ContentItem) -> ContentItem:
        url = f"{self.api_url}/comic/{item.url}?tachiyomi=true"
        jo = parse_json(await self.http_get(url))
        try:
            comic = jo["comic"]
            artists = jo.get("artists") or []
            return item.copy_with(
                title=comic["title"],
                is_nsfw=bool(jo.get("matureContent")) or bool(comic.get("hentai")),
                description=comic.get("parsed") or comic.get("desc"),
                tags=item.tags | {
                    ContentTag(title=g["name"], key=g["slug"], source=self.source)
                    for g in jo.get("genres") or []
                },
                author=artists[0]["name"] if artists else None,
                chapters=await self._get_chapters(comic["id"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            self.parse_failed(f"Malformed comic payload: {e}", url)

    async def _get_pages(self, chapter: ContentChapter) -> list[ContentPage]:
        url = f"{self.api_url}/chapter/{chapter.url}?tachiyomi=true"
        jo = parse_json(await self.http_get(url))
        referer = f"https://{self.domain}/"
        try:
            images = jo["chapter"]["images"]
            return [
                ContentPage(
                    id=self.generate_uid(image["url"]),
                    url=image["url"],
                    referer=referer,
                    source=self.source,
                )
                for image in images
            ]
        except (KeyError, TypeError, ValueError) as e:
            self.parse_failed(f"Malformed chapter payload: {e}", url)

    async def _get_tags(self) -> set[ContentTag]:
        return set((await self._tags.get()).values())

    async def _load_tags(self) -> dict[int, ContentTag]:
        url = f"{self.api_url}/genre"
        ja = parse_json_array(await self.http_get(url))
        try:
            tags = {
                int(jo["id"]): ContentTag(title=jo["name"], key=jo["slug"], source=self.source)
                for jo in ja
            }
        except (KeyError, TypeError, ValueError) as e:
            self.parse_failed(f"Malformed genre list: {e}", url)
        logger.debug(f"Loaded {len(tags)} genres of {self.source.name}")
        return tags

    async def _get_chapters(self, comic_id: int) -> tuple[ContentChapter, ...]:
        url = f"{self.api_url}/comic/{comic_id}/chapter?tachiyomi=true&limit={CHAPTERS_LIMIT}"
        jo = parse_json(await self.http_get(url))
        counters: dict[str, int] = {}
        chapters = []
        try:
            # The API lists newest first
            for ch in reversed(jo.get("chapters") or []):
                lang = ch.get("lang") or ""
                counters[lang] = counters.get(lang, 0) + 1
                groups = ch.get("group_name") or []
                chapters.append(
                    ContentChapter(
                        id=self.generate_uid(int(ch["id"])),
                        name=_chapter_name(ch),
                        number=counters[lang],
                        url=ch["hid"],
                        scanlator=groups[0] if groups else None,
                        upload_date=parse_date_millis((ch.get("created_at") or "").split("T", 1)[0]),
                        branch=lang or None,
                        source=self.source,
                    )
                )
        except (KeyError, TypeError, ValueError) as e:
            self.parse_failed(f"Malformed chapter list: {e}", url)
        return tuple(chapters)

    def _parse_item(self, jo: dict[str, Any], tags_map: dict[int, ContentTag], url: str) -> ContentItem:
        try:
            slug = jo["slug"]
            rating = jo.get("rating")
            completed = jo.get("translation_completed")
            return ContentItem(
                id=self.generate_uid(slug),
                url=slug,
                public_url=f"https://{self.domain}/comic/{slug}",
                title=jo["title"],
                rating=float(rating) / 10.0 if rating is not None else RATING_UNKNOWN,
                cover_url=jo.get("cover_url") or "",
                description=jo.get("desc"),
                tags=frozenset(
                    tags_map[genre_id] for genre_id in jo.get("genres") or [] if genre_id in tags_map
                ),
                state=None if completed is None else (
                    ContentState.FINISHED if completed else ContentState.ONGOING
                ),
                source=self.source,
            )
        except (KeyError, TypeError, ValueError) as e:
            self.parse_failed(f"Malformed search result: {e}", url)


def _chapter_name(ch: dict[str, Any]) -> str:
    parts = []
    if ch.get("vol"):
        parts.append(f"Vol {ch['vol']}")
    if ch.get("chap"):
        parts.append(f"Chap {ch['chap']}")
    name = " ".join(parts)
    if ch.get("title"):
        name += f": {ch['title']}"
    return name

