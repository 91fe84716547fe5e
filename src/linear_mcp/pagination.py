"""Cursor-based pagination helper for Linear connections."""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from .models import Connection

logger = logging.getLogger("linear-mcp.pagination")

T = TypeVar("T")

DEFAULT_MAX_PAGES = 5


async def collect_all(
    fetch_page: Callable[[Optional[str]], Awaitable[Connection[T]]],
    max_pages: int = DEFAULT_MAX_PAGES
) -> list[T]:
    """Fetch up to ``max_pages`` pages, accumulating their nodes.

    ``fetch_page`` receives the previous page's end cursor (``None`` for the
    first page). The page cap guards against a cursor chain that never ends.
    """
    nodes: list[T] = []
    cursor: Optional[str] = None

    for _ in range(max_pages):
        connection = await fetch_page(cursor)
        nodes.extend(connection.nodes)

        if not connection.page_info.has_next_page or not connection.page_info.end_cursor:
            break
        cursor = connection.page_info.end_cursor
    else:
        logger.warning(f"Stopped paginating after {max_pages} pages ({len(nodes)} items collected)")

    return nodes
