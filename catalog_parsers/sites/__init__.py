"""Bundled site parsers. Importing this package registers them."""

from catalog_parsers.sites.comick import ComickParser
from catalog_parsers.sites.multichan import ChanParser, MangaChanParser, YaoiChanParser

__all__ = ["ChanParser", "ComickParser", "MangaChanParser", "YaoiChanParser"]
