"""Source enumeration: every content origin the parsers can fetch from."""

from enum import Enum


class ContentSource(Enum):
    """A content origin.

    The member name is the stable identity of a source: it seeds entity ids
    and keys the persisted per-source configuration, so members must never
    be renamed. The value carries the display title and content language.
    """

    DUMMY = ("Dummy", None)
    ANIBEL = ("Anibel", "be")
    COMICK_FUN = ("ComicK", None)
    DRAGONTRANSLATION = ("DragonTranslation", "es")
    EPSILONSCAN = ("Epsilonscan", "fr")
    HENTAILIB = ("HentaiLib", "ru")
    MANGACHAN = ("Манга-тян", "ru")
    NICOVIDEOSEIGA = ("Nicovideo Seiga", "ja")
    NINEMANGA_BR = ("NineManga Brasil", "pt")
    NINEMANGA_DE = ("NineManga Deutsch", "de")
    NINEMANGA_EN = ("NineManga English", "en")
    NINEMANGA_ES = ("NineManga Español", "es")
    NINEMANGA_FR = ("NineManga Français", "fr")
    NINEMANGA_IT = ("NineManga Italiano", "it")
    NINEMANGA_RU = ("NineManga Русский", "ru")
    SWEETSCAN = ("Sweet Scan", "pt")
    YAOICHAN = ("Яой-тян", "ru")

    def __init__(self, title: str, locale: str | None) -> None:
        self.title = title
        self.locale = locale

    def __repr__(self) -> str:
        return f"<ContentSource.{self.name}>"
