"""Offset to page-number translation for sites that only paginate by page."""


class Paginator:
    """
    Maps a zero-based item offset to the page number a remote site expects.

    The page size is only an initial guess: every received page is recorded
    with ``record_page`` and exact records always win over the estimate, so
    sites whose real page size differs are followed correctly once the
    caller walks them sequentially.

    Not thread-safe. Keep one instance per parser and call it from a single
    sequential listing flow.
    """

    def __init__(self, initial_page_size: int, first_page: int = 1):
        if initial_page_size <= 0:
            raise ValueError(f"initial_page_size must be positive, got {initial_page_size}")
        self.initial_page_size = initial_page_size
        self.first_page = first_page
        self._pages: dict[int, int] = {}

    def page_for(self, offset: int) -> int:
        """Page that should serve ``offset``."""
        if offset == 0:
            return self.first_page
        page = self._pages.get(offset)
        if page is not None:
            return page
        full_pages, tail = divmod(offset, self.initial_page_size)
        return full_pages + self.first_page + (1 if tail else 0)

    def record_page(self, offset: int, page: int, count: int) -> None:
        """
        Remember what a request returned.

        Args:
            offset: Offset the request was made for
            page: Page number it resolved to
            count: Number of items the page held
        """
        # An empty page keeps the pointer where it is instead of advancing
        self._pages[offset + count] = page + 1 if count > 0 else page

    def __repr__(self) -> str:
        return (
            f"Paginator(initial_page_size={self.initial_page_size}, "
            f"first_page={self.first_page}, recorded={len(self._pages)})"
        )
