"""
Stable 64-bit identifiers for entities of any source.

Ids are persisted by callers, so the algorithm must never change: a
31-multiplier polynomial hash over the source name followed by either the
relative url or a numeric id, wrapped to a signed 64-bit integer. It is
fast and deterministic across processes and platforms, not
collision-resistant.
"""

from catalog_parsers.sources.schemas import ContentSource

SEED = 1125899906842597

_MASK = (1 << 64) - 1
_SIGN_BIT = 1 << 63


def _to_signed(value: int) -> int:
    return value - (1 << 64) if value & _SIGN_BIT else value


def _fold_text(acc: int, text: str) -> int:
    # UTF-16 code units, so astral characters fold as surrogate pairs
    data = text.encode("utf-16-be")
    for i in range(0, len(data), 2):
        acc = (31 * acc + ((data[i] << 8) | data[i + 1])) & _MASK
    return acc


def generate_uid(source: ContentSource, value: str | int) -> int:
    """
    Create an id for an item, chapter or page of ``source``.

    Args:
        source: Source the entity belongs to
        value: Relative url (without domain) or a numeric id native to the source

    Returns:
        Signed 64-bit integer, equal for equal inputs across runs
    """
    acc = _fold_text(SEED, source.name)
    if isinstance(value, bool):
        raise TypeError("generate_uid() expects a url or an integer id, not bool")
    if isinstance(value, int):
        acc = (31 * acc + value) & _MASK
    elif isinstance(value, str):
        acc = _fold_text(acc, value)
    else:
        raise TypeError(f"generate_uid() expects str or int, got {type(value).__name__}")
    return _to_signed(acc)
