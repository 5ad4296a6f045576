"""Tests for offset to page translation."""

import pytest

from catalog_parsers.parsers.paginator import Paginator


class TestPageFor:
    """Tests for Paginator.page_for()."""

    def test_offset_zero_is_first_page(self):
        assert Paginator(20).page_for(0) == 1

    def test_offset_zero_ignores_records(self):
        paginator = Paginator(20)
        paginator.record_page(0, 5, 0)
        assert paginator.page_for(0) == 1

    def test_custom_first_page(self):
        paginator = Paginator(20, first_page=0)
        assert paginator.page_for(0) == 0
        assert paginator.page_for(20) == 1

    def test_estimate_on_page_boundary(self):
        paginator = Paginator(20)
        assert paginator.page_for(20) == 2
        assert paginator.page_for(40) == 3

    def test_estimate_rounds_up_inside_page(self):
        paginator = Paginator(20)
        assert paginator.page_for(5) == 2
        assert paginator.page_for(21) == 3

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            Paginator(0)


class TestRecordPage:
    """Tests for Paginator.record_page()."""

    def test_full_page_points_to_next_page(self):
        paginator = Paginator(20)
        paginator.record_page(offset=0, page=1, count=20)
        assert paginator.page_for(20) == 2

    def test_empty_page_keeps_pointer(self):
        paginator = Paginator(20)
        paginator.record_page(offset=0, page=1, count=20)
        paginator.record_page(offset=20, page=2, count=0)

        assert paginator.page_for(20) == 2
        # No record for 40: falls back to the estimate
        assert paginator.page_for(40) == 3

    def test_records_win_over_estimate(self):
        """A site serving 25 items per page, announced as 20."""
        paginator = Paginator(20)
        assert paginator.page_for(25) == 3

        paginator.record_page(offset=0, page=1, count=25)
        paginator.record_page(offset=25, page=2, count=25)

        assert paginator.page_for(25) == 2
        assert paginator.page_for(50) == 3

    def test_sequential_walk(self):
        paginator = Paginator(10)
        offset = 0
        pages = []
        for size in (10, 10, 7):
            page = paginator.page_for(offset)
            pages.append(page)
            paginator.record_page(offset, page, size)
            offset += size
        assert pages == [1, 2, 3]
        assert paginator.page_for(offset) == 4
