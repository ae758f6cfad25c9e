"""Graph nodes: immutable field mappings, plus typed variants with node maps."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from datetime import datetime, timezone
from typing import Any


def plain_value(value: Any) -> Any:
    """Nodes, edges and lists of them as plain JSON-like values."""

    if isinstance(value, GraphNode):
        return value.as_dict()
    if hasattr(value, "as_list"):
        return value.as_list()
    if isinstance(value, list):
        return [plain_value(item) for item in value]
    return value


class GraphNode(Mapping[str, Any]):
    """A single entity returned by the API.

    Subclasses override :meth:`node_map` to force nested fields to decode
    as a specific node type.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._fields: dict[str, Any] = dict(data or {})

    @classmethod
    def node_map(cls) -> Mapping[str, type["GraphNode"]]:
        return {}

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def get_field(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def field_names(self) -> list[str]:
        return list(self._fields)

    def as_dict(self) -> dict[str, Any]:
        return {key: plain_value(value) for key, value in self._fields.items()}

    def as_json(self, **kwargs: Any) -> str:
        return json.dumps(self.as_dict(), **kwargs)

    def __str__(self) -> str:
        return self.as_json()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._fields!r})"


def _timestamp_field(node: GraphNode, name: str) -> datetime | None:
    value = node.get_field(name)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


class GraphPicture(GraphNode):
    @property
    def url(self) -> str | None:
        return self.get_field("url")

    @property
    def is_silhouette(self) -> bool | None:
        return self.get_field("is_silhouette")


class GraphLocation(GraphNode):
    @property
    def city(self) -> str | None:
        return self.get_field("city")

    @property
    def country(self) -> str | None:
        return self.get_field("country")

    @property
    def latitude(self) -> float | None:
        return self.get_field("latitude")

    @property
    def longitude(self) -> float | None:
        return self.get_field("longitude")


class GraphPage(GraphNode):
    @classmethod
    def node_map(cls) -> Mapping[str, type[GraphNode]]:
        return {
            "best_page": GraphPage,
            "global_brand_parent_page": GraphPage,
            "location": GraphLocation,
            "picture": GraphPicture,
        }

    @property
    def id(self) -> str | None:
        return self.get_field("id")

    @property
    def name(self) -> str | None:
        return self.get_field("name")

    @property
    def category(self) -> str | None:
        return self.get_field("category")


class GraphUser(GraphNode):
    @classmethod
    def node_map(cls) -> Mapping[str, type[GraphNode]]:
        return {
            "hometown": GraphPage,
            "location": GraphPage,
            "significant_other": GraphUser,
            "picture": GraphPicture,
        }

    @property
    def id(self) -> str | None:
        return self.get_field("id")

    @property
    def name(self) -> str | None:
        return self.get_field("name")

    @property
    def email(self) -> str | None:
        return self.get_field("email")


class GraphAlbum(GraphNode):
    @classmethod
    def node_map(cls) -> Mapping[str, type[GraphNode]]:
        return {
            "from": GraphUser,
            "place": GraphPage,
        }

    @property
    def id(self) -> str | None:
        return self.get_field("id")

    @property
    def name(self) -> str | None:
        return self.get_field("name")

    @property
    def count(self) -> int | None:
        return self.get_field("count")


class GraphSessionInfo(GraphNode):
    """Payload of the token debug endpoint."""

    @property
    def app_id(self) -> str | None:
        return self.get_field("app_id")

    @property
    def application(self) -> str | None:
        return self.get_field("application")

    @property
    def expires_at(self) -> datetime | None:
        return _timestamp_field(self, "expires_at")

    @property
    def is_valid(self) -> bool:
        return bool(self.get_field("is_valid", False))

    @property
    def issued_at(self) -> datetime | None:
        return _timestamp_field(self, "issued_at")

    @property
    def scopes(self) -> list[str]:
        return list(plain_value(self.get_field("scopes")) or [])

    @property
    def user_id(self) -> str | None:
        return self.get_field("user_id")


NODE_TYPES: dict[str, type[GraphNode]] = {
    node_type.__name__: node_type
    for node_type in (
        GraphNode,
        GraphAlbum,
        GraphLocation,
        GraphPage,
        GraphPicture,
        GraphSessionInfo,
        GraphUser,
    )
}


def resolve_node_class(node_class: type[GraphNode] | str | None) -> type[GraphNode] | None:
    """Built-in node type by class name; ``None`` for unknown names."""

    if node_class is None:
        return GraphNode
    if isinstance(node_class, str):
        return NODE_TYPES.get(node_class)
    if isinstance(node_class, type) and issubclass(node_class, GraphNode):
        return node_class
    return None


__all__ = [
    "GraphNode",
    "GraphAlbum",
    "GraphLocation",
    "GraphPage",
    "GraphPicture",
    "GraphSessionInfo",
    "GraphUser",
    "NODE_TYPES",
    "resolve_node_class",
    "plain_value",
]
