"""Typed node and edge structures decoded from API responses."""

from .edge import GraphEdge
from .factory import GraphNodeFactory
from .node import (
    GraphAlbum,
    GraphLocation,
    GraphNode,
    GraphPage,
    GraphPicture,
    GraphSessionInfo,
    GraphUser,
)

__all__ = [
    "GraphAlbum",
    "GraphEdge",
    "GraphLocation",
    "GraphNode",
    "GraphNodeFactory",
    "GraphPage",
    "GraphPicture",
    "GraphSessionInfo",
    "GraphUser",
]
