"""catalog-parsers - uniform catalog, chapter and page extraction from content sites.

Provides the parser contract every site parser implements, stable entity
ids, per-source domain configuration, offset pagination and favicon
selection.
"""

from catalog_parsers.parsers import (  # noqa: F401
    ContentItem,
    ContentParser,
    ContentTag,
    HttpLoaderContext,
    create_parser,
)
from catalog_parsers.sources import ConfigRegistry, ContentSource  # noqa: F401

# Bundled site parsers register themselves on import
from catalog_parsers import sites  # noqa: F401, E402
