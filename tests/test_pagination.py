"""Tests for the bounded cursor pagination helper."""
import pytest

from linear_mcp.models import Connection, PageInfo
from linear_mcp.pagination import DEFAULT_MAX_PAGES, collect_all


class PagedSource:
    """Serves numbered pages and records the cursor each fetch received."""

    def __init__(self, pages: int, endless: bool = False, cursor_on_last: bool = False):
        self.pages = pages
        self.endless = endless
        self.cursor_on_last = cursor_on_last
        self.cursors = []

    async def __call__(self, cursor):
        self.cursors.append(cursor)
        index = len(self.cursors)
        has_next = self.endless or index < self.pages
        end_cursor = f"cursor-{index}" if has_next or self.cursor_on_last else None
        return Connection[int](
            nodes=[index * 10, index * 10 + 1],
            page_info=PageInfo(has_next_page=has_next, end_cursor=end_cursor),
        )


class TestCollectAll:

    @pytest.mark.asyncio
    async def test_single_page(self):
        source = PagedSource(pages=1)
        assert await collect_all(source) == [10, 11]
        assert source.cursors == [None]

    @pytest.mark.asyncio
    async def test_threads_cursor_between_pages(self):
        source = PagedSource(pages=3)
        assert await collect_all(source) == [10, 11, 20, 21, 30, 31]
        assert source.cursors == [None, "cursor-1", "cursor-2"]

    @pytest.mark.asyncio
    async def test_stops_at_default_page_cap(self):
        source = PagedSource(pages=0, endless=True)
        nodes = await collect_all(source)
        assert len(source.cursors) == DEFAULT_MAX_PAGES == 5
        assert len(nodes) == 10

    @pytest.mark.asyncio
    async def test_stops_at_custom_page_cap(self):
        source = PagedSource(pages=0, endless=True)
        await collect_all(source, max_pages=2)
        assert len(source.cursors) == 2

    @pytest.mark.asyncio
    async def test_stops_when_cursor_missing(self):
        async def no_cursor(cursor):
            return Connection[int](nodes=[1], page_info=PageInfo(has_next_page=True, end_cursor=None))

        assert await collect_all(no_cursor) == [1]

    @pytest.mark.asyncio
    async def test_stops_when_no_next_page_even_with_cursor(self):
        source = PagedSource(pages=2, cursor_on_last=True)
        await collect_all(source)
        assert len(source.cursors) == 2
