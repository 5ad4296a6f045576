"""
Errors raised by parsers.

Transport failures (network, HTTP status, timeouts) are not defined here:
they come from the loader context and propagate to the caller unchanged.
"""

from catalog_parsers.sources.schemas import ContentSource


class ParserError(Exception):
    """Base class for errors a parser raises on its own."""


class ParseError(ParserError):
    """Expected markup or structure is missing from fetched content.

    Local to one operation and never retried by the parser.
    """

    def __init__(self, message: str | None = None, url: str | None = None):
        self.message = message
        self.url = url
        text = message or "Failed to parse content"
        if url:
            text = f"{text} (at {url})"
        super().__init__(text)


class AuthRequiredError(ParserError):
    """The requested content needs a logged-in session on ``source``.

    Callers route the user to the source's login flow and retry.
    """

    def __init__(self, source: ContentSource):
        self.source = source
        super().__init__(f"Authorization required for {source.title}")
