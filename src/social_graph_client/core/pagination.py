"""Edge pagination helpers based on the ``paging`` links."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from ..graph.edge import PAGINATION_DIRECTIONS, GraphEdge
from .errors import GraphPaginationError
from .request import GraphRequest


def validate_direction(direction: str) -> None:
    if direction not in PAGINATION_DIRECTIONS:
        raise GraphPaginationError(f"Unknown pagination direction: {direction}")


def page_request(edge: GraphEdge, direction: str) -> GraphRequest | None:
    validate_direction(direction)
    return edge.get_pagination_request(direction)


def iterate_edge_pages(
    first_edge: GraphEdge,
    fetch_page: Callable[[GraphRequest], GraphEdge | None],
    *,
    direction: str = "next",
    max_pages: int = 10_000,
) -> Iterator[GraphEdge]:
    """Yield ``first_edge`` and every following page until the links run out."""

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

        next_edge = fetch_page(request)
        if next_edge is None:
            return
        current = next_edge

    raise GraphPaginationError("Exceeded pagination guardrail (max_pages)")


__all__ = [
    "validate_direction",
    "page_request",
    "iterate_edge_pages",
]
