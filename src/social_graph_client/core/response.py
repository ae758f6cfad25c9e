"""Decoded API responses."""

from __future__ import annotations

from collections.abc import Mapping

from ..graph.edge import GraphEdge
from ..graph.factory import GraphNodeFactory, NodeType
from ..graph.node import GraphNode
from .auth import Credentials
from .errors import GraphResponseError, classify_api_error
from .request import GraphRequest
from .response_parsing import DecodedBody, decode_body, is_error_body


class GraphResponse:
    """Response to one request; the body is decoded on construction.

    When the body carries an ``error`` key the matching exception is built
    right away and kept in :attr:`thrown_exception`. Raising it is left to
    the caller (see :meth:`raise_for_error`).
    """

    def __init__(
        self,
        request: GraphRequest,
        body: str | bytes | None = None,
        http_status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._request = request
        self._body = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        self._http_status_code = http_status_code
        self._headers: dict[str, str] = dict(headers or {})
        self._decoded_body: DecodedBody = {}
        self._thrown_exception: GraphResponseError | None = None
        self.decode_body()

    def decode_body(self) -> None:
        self._decoded_body = decode_body(self._body)
        if self.is_error():
            self.make_exception()

    def make_exception(self) -> None:
        self._thrown_exception = classify_api_error(self)

    @property
    def request(self) -> GraphRequest:
        return self._request

    @property
    def http_status_code(self) -> int | None:
        return self._http_status_code

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def body(self) -> str | None:
        return self._body

    @property
    def decoded_body(self) -> DecodedBody:
        return self._decoded_body

    @property
    def thrown_exception(self) -> GraphResponseError | None:
        return self._thrown_exception

    @property
    def credentials(self) -> Credentials | None:
        return self._request.credentials

    @property
    def access_token(self) -> str | None:
        return self._request.access_token

    @property
    def app_secret_proof(self) -> str | None:
        return self._request.get_app_secret_proof()

    def get_header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self._headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def etag(self) -> str | None:
        return self.get_header("ETag")

    @property
    def graph_version(self) -> str | None:
        return self.get_header("Facebook-API-Version")

    def is_error(self) -> bool:
        return is_error_body(self._decoded_body)

    def raise_for_error(self) -> None:
        if self._thrown_exception is not None:
            raise self._thrown_exception

    def get_graph_node(self, subclass: NodeType = None) -> GraphNode:
        return GraphNodeFactory(self).make_graph_node(subclass)

    def get_graph_edge(self, subclass: NodeType = None) -> GraphEdge:
        return GraphNodeFactory(self).make_graph_edge(subclass)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(http_status_code={self._http_status_code!r}, request={self._request!r})"


__all__ = [
    "GraphResponse",
]
