"""Graph edges: ordered node collections with paging metadata."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..core.errors import GraphPaginationError
from ..core.url import base_graph_url_endpoint
from .node import GraphNode, plain_value

if TYPE_CHECKING:
    from ..core.request import GraphRequest

EdgeKey = int | str
PAGINATION_DIRECTIONS = ("next", "previous")


def _nested(metadata: Mapping[str, Any], *path: str) -> Any:
    current: Any = metadata
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


class GraphEdge:
    """Ordered collection of nodes produced by one request.

    Items are keyed by position when built from a list; string keys are
    accepted too. Iteration yields values in insertion order.
    """

    def __init__(
        self,
        request: "GraphRequest",
        items: Sequence[Any] | Mapping[EdgeKey, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
        parent_edge_endpoint: str | None = None,
        subclass_name: type[GraphNode] | str | None = None,
    ) -> None:
        self._request = request
        if isinstance(items, Mapping):
            self._items: dict[EdgeKey, Any] = dict(items)
        else:
            self._items = dict(enumerate(items or ()))
        self._metadata = dict(metadata or {})
        self._parent_edge_endpoint = parent_edge_endpoint
        self._subclass_name = subclass_name

    # ------------------------------------------------------------------
    # Collection protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items.values())

    def __getitem__(self, key: EdgeKey) -> Any:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphEdge):
            return NotImplemented
        return (
            self._items == other._items
            and self._metadata == other._metadata
            and self._parent_edge_endpoint == other._parent_edge_endpoint
            and self._subclass_name == other._subclass_name
        )

    __hash__ = None  # type: ignore[assignment]

    def keys(self) -> list[EdgeKey]:
        return list(self._items)

    def get_field(self, name: EdgeKey, default: Any = None) -> Any:
        return self._items.get(name, default)

    def field_names(self) -> list[EdgeKey]:
        return list(self._items)

    def all(self) -> dict[EdgeKey, Any]:
        return dict(self._items)

    def as_list(self) -> list[Any] | dict[EdgeKey, Any]:
        """Plain representation; a dict when string keys are present."""

        if list(self._items) == list(range(len(self._items))):
            return [plain_value(value) for value in self._items.values()]
        return {key: plain_value(value) for key, value in self._items.items()}

    def as_json(self, **kwargs: Any) -> str:
        return json.dumps(self.as_list(), **kwargs)

    def __str__(self) -> str:
        return self.as_json()

    def __repr__(self) -> str:
        return f"GraphEdge(items={len(self._items)}, parent={self._parent_edge_endpoint!r})"

    def map(self, callback: Callable[[Any, EdgeKey], Any]) -> "GraphEdge":
        """New edge with ``callback(value, key)`` applied to every item."""

        return GraphEdge(
            self._request,
            {key: callback(value, key) for key, value in self._items.items()},
            self._metadata,
            self._parent_edge_endpoint,
            self._subclass_name,
        )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def request(self) -> "GraphRequest":
        return self._request

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    @property
    def parent_edge_endpoint(self) -> str | None:
        return self._parent_edge_endpoint

    @property
    def subclass_name(self) -> type[GraphNode] | str | None:
        return self._subclass_name

    def get_cursor(self, direction: str) -> str | None:
        """Cursor for ``after`` or ``before``; informational only."""

        return _nested(self._metadata, "paging", "cursors", direction)

    @property
    def next_cursor(self) -> str | None:
        return self.get_cursor("after")

    @property
    def previous_cursor(self) -> str | None:
        return self.get_cursor("before")

    @property
    def total_count(self) -> int | None:
        """Set only when the request asked for ``summary=true``."""

        return _nested(self._metadata, "summary", "total_count")

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def validate_for_pagination(self) -> None:
        if self._request.method != "GET":
            raise GraphPaginationError("You can only paginate on a GET request.")

    def get_pagination_url(self, direction: str) -> str | None:
        self.validate_for_pagination()
        if direction not in PAGINATION_DIRECTIONS:
            raise GraphPaginationError(f"Unknown pagination direction: {direction}")

        page_url = _nested(self._metadata, "paging", direction)
        if not page_url:
            return None
        return base_graph_url_endpoint(str(page_url))

    def get_pagination_request(self, direction: str) -> "GraphRequest | None":
        page_url = self.get_pagination_url(direction)
        if page_url is None:
            return None

        new_request = self._request.clone()
        new_request.set_endpoint(page_url)
        return new_request

    def next_page_request(self) -> "GraphRequest | None":
        return self.get_pagination_request("next")

    def previous_page_request(self) -> "GraphRequest | None":
        return self.get_pagination_request("previous")


__all__ = [
    "GraphEdge",
    "PAGINATION_DIRECTIONS",
]
