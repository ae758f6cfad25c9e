"""Async edge pagination helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

from ..graph.edge import GraphEdge
from .errors import GraphPaginationError
from .pagination import page_request
from .request import GraphRequest


async def aiterate_edge_pages(
    first_edge: GraphEdge,
    fetch_page: Callable[[GraphRequest], Awaitable[GraphEdge | None]],
    *,
    direction: str = "next",
    max_pages: int = 10_000,
) -> AsyncIterator[GraphEdge]:
    current = first_edge
    seen_urls: set[str] = set()

    for _ in range(max_pages):
        yield current

        request = page_request(current, direction)
        if request is None:
            return
        page_url = request.get_url()
        if page_url in seen_urls:
            raise GraphPaginationError("Pagination loop detected")
        seen_urls.add(page_url)

        next_edge = await fetch_page(request)
        if next_edge is None:
            return
        current = next_edge

    raise GraphPaginationError("Exceeded pagination guardrail (max_pages)")


__all__ = [
    "aiterate_edge_pages",
]
