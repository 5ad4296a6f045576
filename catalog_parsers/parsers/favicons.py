"""Favicon candidates of a site and best-fit selection among them."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from urllib.parse import urlsplit

_REL_WEIGHTS = {
    "apple-touch-icon": 1,  # usually the best quality
    "mask-icon": -1,
}


def _type_of(url: str) -> str:
    segment = urlsplit(url).path.rsplit("/", 1)[-1]
    if "." not in segment:
        return ""
    return segment.rsplit(".", 1)[-1].lower()


@dataclass(frozen=True, eq=True)
class Favicon:
    """
    A discovered icon.

    Ordering is by pixel size, then by ``rel``: ``apple-touch-icon`` ranks
    above a plain icon of the same size and ``mask-icon`` below it.
    Equality compares url, size and rel.
    """

    url: str
    size: int
    rel: str | None = None
    type: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _type_of(self.url))

    @property
    def _rank(self) -> tuple[int, int]:
        return self.size, _REL_WEIGHTS.get(self.rel, 0)

    def __lt__(self, other: "Favicon") -> bool:
        if not isinstance(other, Favicon):
            return NotImplemented
        return self._rank < other._rank

    def __gt__(self, other: "Favicon") -> bool:
        if not isinstance(other, Favicon):
            return NotImplemented
        return self._rank > other._rank

    def __le__(self, other: "Favicon") -> bool:
        if not isinstance(other, Favicon):
            return NotImplemented
        return self._rank <= other._rank

    def __ge__(self, other: "Favicon") -> bool:
        if not isinstance(other, Favicon):
            return NotImplemented
        return self._rank >= other._rank


class FaviconSet(Sequence):
    """Immutable favicon collection ordered from the largest icon down.

    ``referer`` is the page the icons were discovered on and should be sent
    when any of them is downloaded.
    """

    def __init__(self, favicons: Iterable[Favicon], referer: str) -> None:
        self._icons: tuple[Favicon, ...] = tuple(sorted(favicons, reverse=True))
        self.referer = referer

    def __len__(self) -> int:
        return len(self._icons)

    def __getitem__(self, index):
        return self._icons[index]

    def __iter__(self) -> Iterator[Favicon]:
        return iter(self._icons)

    def __contains__(self, item: object) -> bool:
        return item in self._icons

    def find(self, size: int, types: set[str] | frozenset[str] | None = None) -> Favicon | None:
        """
        Find the smallest icon that is still at least ``size`` pixels.

        Falls back to the largest icon when all of them are smaller.

        Args:
            size: Requested size in pixels
            types: Accepted file types (e.g. {"png", "svg"}); None accepts any

        Returns:
            The chosen Favicon or None if no icon has an accepted type
        """
        if types is not None and not types:
            raise ValueError("types may be None but not empty")
        result: Favicon | None = None
        for icon in self._icons:
            if types is not None and icon.type not in types:
                continue
            if result is None or icon.size >= size:
                result = icon
            else:
                break
        return result

    def __repr__(self) -> str:
        return f"FaviconSet(referer={self.referer!r}, icons={list(self._icons)!r})"
