"""Shape classification: turns decoded payloads into nodes and edges.

Assumptions about the API's JSON:

* an edge is always a list (or an object keyed ``"0".."n-1"``) under ``data``
* a node is always an object, and may nest nodes and edges
* a node is sometimes wrapped in ``data`` on its own
* a bare array inside a node is an edge with no paging metadata
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..core.errors import GraphShapeError
from .edge import GraphEdge
from .node import GraphNode, resolve_node_class

if TYPE_CHECKING:
    from ..core.response import GraphResponse

NodeType = type[GraphNode] | str | None
NodeOrEdge = GraphNode | GraphEdge


def is_castable_as_graph_edge(data: object) -> bool:
    """True for lists, and for objects whose keys are exactly ``0..n-1``.

    The empty object is vacuously an edge.
    """

    if isinstance(data, list):
        return True
    if not isinstance(data, Mapping):
        return False
    expected = [str(index) for index in range(len(data))]
    return [str(key) for key in data] == expected


def validate_subclass(subclass: NodeType) -> type[GraphNode]:
    """Resolve a node type or a built-in type name; reject anything else."""

    resolved = resolve_node_class(subclass)
    if resolved is None:
        raise GraphShapeError(
            f'The given subclass "{subclass}" is not valid. '
            "Cannot cast to an object that is not a GraphNode subclass."
        )
    return resolved


def get_metadata(data: Mapping[str, Any]) -> dict[str, Any]:
    """Everything in an edge payload except ``data``."""

    return {key: value for key, value in data.items() if key != "data"}


def _has_data(data: Mapping[str, Any]) -> bool:
    return data.get("data") is not None


def _parent_edge_endpoint(parent_node_id: str | None, parent_key: str | int | None) -> str | None:
    if parent_node_id is None or parent_key is None:
        return None
    return f"/{parent_node_id}/{parent_key}"


def _edge_items(data: object) -> list[Any]:
    if isinstance(data, Mapping):
        return list(data.values())
    return list(data) if isinstance(data, Sequence) else []


class GraphNodeFactory:
    """Builds nodes and edges from one response, recursively."""

    def __init__(self, response: "GraphResponse") -> None:
        self._response = response
        self._decoded_body = response.decoded_body

    def make_graph_node(self, subclass: NodeType = None) -> GraphNode:
        self.validate_response_castable_as_graph_node()
        result = self.cast_as_graph_node_or_graph_edge(self._decoded_body, subclass)
        if not isinstance(result, GraphNode):
            raise GraphShapeError("Unable to convert response from Graph to a GraphNode.")
        return result

    def make_graph_edge(self, subclass: NodeType = None) -> GraphEdge:
        self.validate_response_castable_as_graph_edge()
        result = self.cast_as_graph_node_or_graph_edge(self._decoded_body, subclass)
        if not isinstance(result, GraphEdge):
            raise GraphShapeError("Unable to convert response from Graph to a GraphEdge.")
        return result

    def validate_response_castable_as_graph_node(self) -> None:
        body = self._decoded_body
        if not isinstance(body, Mapping) or (
            _has_data(body) and is_castable_as_graph_edge(body["data"])
        ):
            raise GraphShapeError(
                "Unable to convert response from Graph to a GraphNode because the response "
                "looks like a GraphEdge. Try make_graph_edge() instead."
            )

    def validate_response_castable_as_graph_edge(self) -> None:
        body = self._decoded_body
        if not (
            isinstance(body, Mapping) and _has_data(body) and is_castable_as_graph_edge(body["data"])
        ):
            raise GraphShapeError(
                "Unable to convert response from Graph to a GraphEdge because the response "
                "does not look like a GraphEdge. Try make_graph_node() instead."
            )

    def cast_as_graph_node_or_graph_edge(
        self,
        data: Mapping[str, Any] | list[Any],
        subclass: NodeType = None,
        parent_key: str | int | None = None,
        parent_node_id: str | None = None,
    ) -> NodeOrEdge:
        if isinstance(data, list):
            return self.make_array_edge(data, subclass, parent_key, parent_node_id)
        if _has_data(data):
            if is_castable_as_graph_edge(data["data"]):
                return self.safely_make_graph_edge(data, subclass, parent_key, parent_node_id)
            # A single node is sometimes nested under "data".
            if isinstance(data["data"], Mapping):
                data = data["data"]

        return self.safely_make_graph_node(data, subclass)

    def safely_make_graph_node(self, data: Mapping[str, Any], subclass: NodeType = None) -> GraphNode:
        node_type = validate_subclass(subclass)
        node_map = node_type.node_map()

        parent_node_id = data.get("id")
        if parent_node_id is not None:
            parent_node_id = str(parent_node_id)

        fields: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, (Mapping, list)):
                fields[key] = self.cast_as_graph_node_or_graph_edge(
                    value, node_map.get(key), key, parent_node_id
                )
            else:
                fields[key] = value

        return node_type(fields)

    def safely_make_graph_edge(
        self,
        data: Mapping[str, Any],
        subclass: NodeType = None,
        parent_key: str | int | None = None,
        parent_node_id: str | None = None,
    ) -> GraphEdge:
        if not _has_data(data):
            raise GraphShapeError('Cannot cast data to GraphEdge. Expected a "data" key.')

        # Items of an enveloped edge are always nodes, even when they carry their own "data".
        items = [
            self.safely_make_graph_node(item, subclass)
            if isinstance(item, Mapping)
            else self._cast_item(item, subclass, index)
            for index, item in enumerate(_edge_items(data["data"]))
        ]
        return GraphEdge(
            self._response.request,
            items,
            get_metadata(data),
            _parent_edge_endpoint(parent_node_id, parent_key),
            subclass,
        )

    def make_array_edge(
        self,
        data: list[Any],
        subclass: NodeType = None,
        parent_key: str | int | None = None,
        parent_node_id: str | None = None,
    ) -> GraphEdge:
        """Wrap a bare JSON array (no ``data``/``paging`` envelope) as an edge without metadata."""
        items = [self._cast_item(item, subclass, index) for index, item in enumerate(data)]
        return GraphEdge(
            self._response.request,
            items,
            {},
            _parent_edge_endpoint(parent_node_id, parent_key),
            subclass,
        )

    def _cast_item(self, item: Any, subclass: NodeType, index: int) -> Any:
        if isinstance(item, (Mapping, list)):
            return self.cast_as_graph_node_or_graph_edge(item, subclass, index)
        return item


__all__ = [
    "GraphNodeFactory",
    "NodeOrEdge",
    "is_castable_as_graph_edge",
    "validate_subclass",
    "get_metadata",
]
