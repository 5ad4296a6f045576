"""Parser framework - contract, entity schema and shared helpers."""

from catalog_parsers.parsers.base_parser import AuthProvider, ContentParser
from catalog_parsers.parsers.exceptions import AuthRequiredError, ParseError, ParserError
from catalog_parsers.parsers.favicons import Favicon, FaviconSet
from catalog_parsers.parsers.http_client import (
    HttpLoaderContext,
    HTTPClientError,
    LoaderContext,
    RateLimitError,
)
from catalog_parsers.parsers.identity import generate_uid
from catalog_parsers.parsers.lazy import AsyncLazy
from catalog_parsers.parsers.paginator import Paginator
from catalog_parsers.parsers.registry import create_parser, registered_sources, source_parser
from catalog_parsers.parsers.schemas import (
    RATING_UNKNOWN,
    ContentChapter,
    ContentItem,
    ContentPage,
    ContentState,
    ContentTag,
    SortOrder,
)

__all__ = [
    "RATING_UNKNOWN",
    "AsyncLazy",
    "AuthProvider",
    "AuthRequiredError",
    "ContentChapter",
    "ContentItem",
    "ContentPage",
    "ContentParser",
    "ContentState",
    "ContentTag",
    "Favicon",
    "FaviconSet",
    "HTTPClientError",
    "HttpLoaderContext",
    "LoaderContext",
    "Paginator",
    "ParseError",
    "ParserError",
    "RateLimitError",
    "SortOrder",
    "create_parser",
    "generate_uid",
    "registered_sources",
    "source_parser",
]
