"""
Loader context: the transport every parser fetches through.

Provides:
- LoaderContext: what parsers depend on (HTTP, cookies, per-source config)
- HttpLoaderContext: httpx implementation with retry and backoff
- parse_html / parse_json helpers turning responses into documents

Retrying, timeouts and cookie persistence belong here, never in parsers.
Errors raised by this layer (HTTPClientError and subclasses, or
asyncio.CancelledError) propagate through parsers unchanged.
"""

import asyncio
import json
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from bs4 import BeautifulSoup

from catalog_parsers.config.settings import Settings, get_settings
from catalog_parsers.parsers.exceptions import ParseError
from catalog_parsers.parsers.html import make_document
from catalog_parsers.sources.schemas import ContentSource
from catalog_parsers.sources.service import ConfigRegistry, SourceConfig

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior with exponential backoff.

    Attributes:
        max_retries: Maximum number of retry attempts (0 = no retries)
        max_backoff_seconds: Maximum delay between retries
        base_delay: Initial delay in seconds (doubles each retry)
        jitter_factor: Random jitter as fraction of delay (0.0-1.0)
    """

    max_retries: int = 3
    max_backoff_seconds: float = 60.0
    base_delay: float = 1.0
    jitter_factor: float = 0.1

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryConfig":
        return cls(
            max_retries=settings.max_http_retries,
            max_backoff_seconds=settings.max_backoff_seconds,
        )

    def calculate_backoff(self, attempt: int) -> float:
        """Backoff for a zero-based attempt: base * 2^attempt, capped, plus jitter."""
        delay = min(self.base_delay * (2**attempt), self.max_backoff_seconds)
        return delay + delay * self.jitter_factor * random.random()

    def is_retryable_status(self, status_code: int) -> bool:
        """429 and the transient 5xx codes are retried."""
        return status_code in {429, 500, 502, 503, 504}


class HTTPClientError(Exception):
    """Base exception for transport errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(HTTPClientError):
    """Raised when rate limit is hit and all retries exhausted."""

    pass


class GraphQLError(HTTPClientError):
    """The endpoint answered with a GraphQL ``errors`` list."""

    def __init__(self, errors: list[Any], url: str):
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        )
        super().__init__(f"GraphQL query to {url} failed: {messages}")
        self.errors = errors


class CookieJar:
    """Cookie storage shared by all requests of a loader context."""

    def __init__(self, cookies: httpx.Cookies | None = None) -> None:
        self.cookies = cookies if cookies is not None else httpx.Cookies()

    def get_cookies(self, domain: str) -> dict[str, str]:
        """Cookies that would be sent to ``domain`` (parent domains included)."""
        result = {}
        for cookie in self.cookies.jar:
            cookie_domain = cookie.domain.lstrip(".")
            if domain == cookie_domain or domain.endswith("." + cookie_domain):
                result[cookie.name] = cookie.value
        return result

    def insert_cookies(self, domain: str, **cookies: str) -> None:
        for name, value in cookies.items():
            self.cookies.set(name, value, domain=domain)

    def clear(self, domain: str | None = None) -> None:
        if domain is None:
            self.cookies.clear()
        else:
            self.cookies.clear(domain=domain)


class LoaderContext(ABC):
    """
    Everything a parser needs from the outside world.

    Owns the ConfigRegistry, so per-source config lives exactly as long as
    the context the application created.
    """

    def __init__(self, config_registry: ConfigRegistry | None = None):
        self._config_registry = config_registry or ConfigRegistry()

    @property
    def config_registry(self) -> ConfigRegistry:
        return self._config_registry

    @property
    @abstractmethod
    def cookie_jar(self) -> CookieJar:
        ...

    @abstractmethod
    async def http_get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """GET ``url``; raises HTTPClientError on failure status."""
        ...

    @abstractmethod
    async def http_post(
        self,
        url: str,
        form: dict[str, str] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        ...

    async def graphql_query(self, endpoint: str, query: str) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object."""
        response = await self.http_post(endpoint, json_body={"query": query})
        payload = parse_json(response)
        errors = payload.get("errors")
        if errors:
            raise GraphQLError(errors, endpoint)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise ParseError("GraphQL response has no data", endpoint)
        return data

    def get_config(self, source: ContentSource) -> SourceConfig:
        return self._config_registry.get_or_create(source)


class HttpLoaderContext(LoaderContext):
    """
    httpx-backed loader context.

    Example:
        async with HttpLoaderContext() as context:
            parser = create_parser(ContentSource.COMICK_FUN, context)
            items = await parser.get_list(0)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        config_registry: ConfigRegistry | None = None,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config_registry)
        self.settings = settings or get_settings()
        self.retry_config = retry_config or RetryConfig.from_settings(self.settings)
        self._transport = transport
        self._cookie_jar = CookieJar()
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpLoaderContext":
        """Enter async context manager, create client."""
        self._client = httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds,
            headers={"User-Agent": self.settings.user_agent},
            cookies=self._cookie_jar.cookies,
            follow_redirects=True,
            transport=self._transport,
        )
        # The client copies the cookies it is given; share its jar instead
        self._cookie_jar.cookies = self._client.cookies
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager, close client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def cookie_jar(self) -> CookieJar:
        return self._cookie_jar

    async def http_get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        return await self._request_with_retry("GET", url, headers=headers)

    async def http_post(
        self,
        url: str,
        form: dict[str, str] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self._request_with_retry(
            "POST", url, headers=headers, form=form, json_body=json_body
        )

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        form: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> httpx.Response:
        """
        Execute HTTP request with retry logic.

        Implements exponential backoff with jitter on retryable statuses and
        on timeouts/connection errors.
        """
        if not self._client:
            raise RuntimeError("HttpLoaderContext must be used as async context manager")

        last_status_code: int | None = None
        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            try:
                response = await self._client.request(
                    method,
                    url,
                    headers=headers,
                    data=form,
                    json=json_body,
                )
            except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError) as e:
                if attempt < self.retry_config.max_retries:
                    backoff = self.retry_config.calculate_backoff(attempt)
                    logger.warning(
                        f"Retryable error {type(e).__name__} for {url}, "
                        f"attempt {attempt + 1}/{attempts}, backing off {backoff:.2f}s"
                    )
                    await asyncio.sleep(backoff)
                    continue
                raise HTTPClientError(
                    f"Request failed after {attempt + 1} attempts: {e}",
                    status_code=last_status_code,
                ) from e

            if self.retry_config.is_retryable_status(response.status_code):
                last_status_code = response.status_code
                if attempt < self.retry_config.max_retries:
                    backoff = self.retry_config.calculate_backoff(attempt)
                    logger.warning(
                        f"Retryable status {response.status_code} from {url}, "
                        f"attempt {attempt + 1}/{attempts}, backing off {backoff:.2f}s"
                    )
                    await asyncio.sleep(backoff)
                    continue
                error_cls = RateLimitError if response.status_code == 429 else HTTPClientError
                raise error_cls(
                    f"Request to {url} failed with status {response.status_code} "
                    f"after {attempt + 1} attempts",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            if response.status_code >= 400:
                raise HTTPClientError(
                    f"Request to {url} failed with status {response.status_code}",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            return response

        # Should not reach here, but just in case
        raise HTTPClientError(
            f"Request failed after {attempts} attempts",
            status_code=last_status_code,
        )


def parse_html(response: httpx.Response) -> BeautifulSoup:
    """Parse an HTML response into a document that knows its url."""
    return make_document(response.text, str(response.url))


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Invalid JSON: {e}", str(response.url)) from e


def parse_json(response: httpx.Response) -> dict[str, Any]:
    """Decode a response whose body must be a JSON object."""
    data = _decode_json(response)
    if not isinstance(data, dict):
        raise ParseError(f"Expected JSON object, got {type(data).__name__}", str(response.url))
    return data


def parse_json_array(response: httpx.Response) -> list[Any]:
    """Decode a response whose body must be a JSON array."""
    data = _decode_json(response)
    if not isinstance(data, list):
        raise ParseError(f"Expected JSON array, got {type(data).__name__}", str(response.url))
    return data
