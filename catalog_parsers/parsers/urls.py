"""Url helpers for relative urls stored on entities."""

import re
from urllib.parse import quote, urlsplit


def to_absolute_url(url: str, domain: str) -> str:
    """
    Resolve a url stored on an entity against ``domain``.

    Absolute urls are returned unchanged and protocol-relative ones get
    ``https:``.
    """
    if url.startswith("//"):
        return "https:" + url
    if urlsplit(url).scheme in ("http", "https"):
        return url
    if url.startswith("/"):
        return f"https://{domain}{url}"
    return f"https://{domain}/{url}"


def to_relative_url(url: str, domain: str) -> str:
    """Strip scheme and host from an url pointing to ``domain``; other urls are kept."""
    if not url or url.startswith("/"):
        return url
    return re.sub(rf"^[^/]{{2,6}}://{re.escape(domain)}/", "/", url, count=1, flags=re.IGNORECASE)


def url_encoded(value: str) -> str:
    """Percent-encode a value for use inside a path or query."""
    return quote(value, safe="")
