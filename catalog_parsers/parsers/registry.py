"""Registry of parser classes by source."""

import logging
from collections.abc import Callable

from catalog_parsers.parsers.base_parser import ContentParser
from catalog_parsers.parsers.http_client import LoaderContext
from catalog_parsers.sources.schemas import ContentSource

logger = logging.getLogger(__name__)

_PARSERS: dict[ContentSource, type[ContentParser]] = {}


def source_parser(source: ContentSource) -> Callable[[type[ContentParser]], type[ContentParser]]:
    """
    Class decorator registering a parser for ``source``.

    The decorated class is instantiated as ``cls(context)``, so it must fix
    its source in its own constructor.

    Example:
        @source_parser(ContentSource.COMICK_FUN)
        class ComickParser(ContentParser):
            def __init__(self, context):
                super().__init__(context, ContentSource.COMICK_FUN)
    """

    def decorator(cls: type[ContentParser]) -> type[ContentParser]:
        registered = _PARSERS.get(source)
        if registered is not None and registered is not cls:
            raise ValueError(
                f"{source.name} is already handled by {registered.__name__}, "
                f"cannot register {cls.__name__}"
            )
        _PARSERS[source] = cls
        return cls

    return decorator


def registered_sources() -> list[ContentSource]:
    """Sources with a registered parser, in enum order."""
    return [source for source in ContentSource if source in _PARSERS]


def get_parser_class(source: ContentSource) -> type[ContentParser]:
    try:
        return _PARSERS[source]
    except KeyError:
        raise LookupError(f"No parser registered for {source.name}") from None


def create_parser(source: ContentSource, context: LoaderContext) -> ContentParser:
    """Instantiate the parser of ``source`` bound to ``context``."""
    parser = get_parser_class(source)(context)
    logger.debug(f"Created {parser!r}")
    return parser
