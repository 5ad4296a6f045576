"""
BeautifulSoup helpers shared by HTML parsers.

Documents created by ``make_document`` remember the url they were fetched
from, so helpers can resolve relative links and report where a lookup
failed. Lookups that a parser cannot do without raise ParseError.
"""

import re
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from catalog_parsers.parsers.exceptions import ParseError

_URL_ATTR = "_document_url"


def make_document(markup: str | bytes, url: str | None = None) -> BeautifulSoup:
    """Parse HTML and remember its origin url."""
    soup = BeautifulSoup(markup, "html.parser")
    setattr(soup, _URL_ATTR, url)
    return soup


def document_url(element: Tag) -> str | None:
    """Url of the document ``element`` belongs to, if known."""
    root = element
    for parent in element.parents:
        root = parent
    # vars() on purpose: attribute access on a Tag falls back to a child lookup
    return vars(root).get(_URL_ATTR)


def host_of(element: Tag) -> str | None:
    url = document_url(element)
    if not url:
        return None
    return urlsplit(url).hostname


def attr_or_none(element: Tag, name: str) -> str | None:
    """Attribute value, or None when it is missing or empty."""
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def attr_as_relative_url_or_none(element: Tag, name: str) -> str | None:
    """Attribute value stripped of scheme and host, or None when missing."""
    value = (attr_or_none(element, name) or "").strip()
    if not value:
        return None
    if value.startswith("/"):
        return value
    host = host_of(element)
    if host is None:
        return None
    _, found, rest = value.partition(host)
    return rest if found else value


def attr_as_relative_url(element: Tag, name: str) -> str:
    url = attr_as_relative_url_or_none(element, name)
    if url is None:
        raise ValueError(f'Cannot get relative url for {name}: "{element.get(name, "")}"')
    return url


def attr_as_absolute_url_or_none(element: Tag, name: str) -> str | None:
    """Attribute value resolved against the document url, or None."""
    value = (attr_or_none(element, name) or "").strip()
    if not value:
        return None
    base = document_url(element)
    if base:
        return urljoin(base, value)
    return value if urlsplit(value).scheme else None


def attr_as_absolute_url(element: Tag, name: str) -> str:
    url = attr_as_absolute_url_or_none(element, name)
    if url is None:
        raise ValueError(f'Cannot get absolute url for {name}: "{element.get(name, "")}"')
    return url


def style_value_or_none(element: Tag, prop: str) -> str | None:
    """Value of one css property of the ``style`` attribute."""
    style = attr_or_none(element, "style")
    if style is None:
        return None
    match = re.search(rf"{re.escape(prop)}\s*:\s*[^;]+", style)
    if match is None:
        return None
    return match.group(0).split(":", 1)[1].rstrip(";").strip()


def select_first_or_raise(element: Tag, css: str) -> Tag:
    found = element.select_one(css)
    if found is None:
        raise ParseError(f'Cannot find "{css}"', document_url(element))
    return found


def select_or_raise(element: Tag, css: str) -> list[Tag]:
    found = element.select(css)
    if not found:
        raise ParseError(f'Empty result for "{css}"', document_url(element))
    return list(found)


def require_element_by_id(element: Tag, element_id: str) -> Tag:
    found = element.find(id=element_id)
    if found is None:
        raise ParseError(f'Cannot find "#{element_id}"', document_url(element))
    return found


def select_last(element: Tag, css: str) -> Tag | None:
    found = element.select(css)
    return found[-1] if found else None


def select_last_or_raise(element: Tag, css: str) -> Tag:
    found = select_last(element, css)
    if found is None:
        raise ParseError(f'Cannot find "{css}"', document_url(element))
    return found
