"""Public async client entrypoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from types import TracebackType
from typing import Any

from .client_shared import (
    RequestCounter,
    base_graph_url,
    build_response,
    log_and_raise_for_error,
    prepare_request_message,
    request_timeout,
    validate_client_config,
)
from .config import GraphClientConfig
from .core.async_pagination import aiterate_edge_pages
from .core.async_transport import AsyncTransport
from .core.auth import AccessToken, Credentials
from .core.batch import BatchRequest, BatchResponse
from .core.errors import GraphClientClosedError
from .core.pagination import validate_direction
from .core.request import GraphRequest
from .core.response import GraphResponse
from .core.transport_shared import AsyncTransportProtocol
from .graph.edge import GraphEdge
from .graph.factory import NodeType

logger = logging.getLogger("social_graph_client")

Params = Mapping[str, Any] | None


class AsyncGraphClient:
    """Async Graph API client with the request, batch and paging surface."""

    def __init__(
        self,
        config: GraphClientConfig | None = None,
        *,
        transport: AsyncTransportProtocol | None = None,
        request_counter: RequestCounter | None = None,
    ) -> None:
        self._config = config or GraphClientConfig.from_env()
        validate_client_config(self._config)

        self._credentials = Credentials(self._config.app_id, self._config.app_secret)
        self._default_access_token: AccessToken | None = (
            AccessToken(self._config.default_access_token)
            if self._config.default_access_token
            else None
        )
        self._transport = transport or AsyncTransport(self._config)
        self._request_counter = request_counter or RequestCounter()
        self._closed = False

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def default_access_token(self) -> AccessToken | None:
        return self._default_access_token

    def set_default_access_token(self, access_token: AccessToken | str) -> None:
        if isinstance(access_token, str):
            access_token = AccessToken(access_token)
        self._default_access_token = access_token

    @property
    def default_graph_version(self) -> str:
        return self._config.default_graph_version

    @property
    def request_counter(self) -> RequestCounter:
        return self._request_counter

    def base_graph_url(self, post_to_video_url: bool = False) -> str:
        return base_graph_url(
            enable_beta_mode=self._config.enable_beta_mode,
            post_to_video_url=post_to_video_url,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphRequest:
        return GraphRequest(
            self._credentials,
            access_token or self._default_access_token,
            method,
            endpoint,
            params,
            etag,
            graph_version or self.default_graph_version,
        )

    async def get(
        self,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphResponse:
        return await self.send_request(
            self.request("GET", endpoint, params, access_token, etag, graph_version)
        )

    async def post(
        self,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphResponse:
        return await self.send_request(
            self.request("POST", endpoint, params, access_token, etag, graph_version)
        )

    async def delete(
        self,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphResponse:
        return await self.send_request(
            self.request("DELETE", endpoint, params, access_token, etag, graph_version)
        )

    async def send_request(self, request: GraphRequest) -> GraphResponse:
        self._ensure_open()
        if not isinstance(request, BatchRequest):
            request.validate_access_token()

        url, method, headers, body = prepare_request_message(
            request,
            self.base_graph_url(request.contains_video_uploads()),
            user_agent=self._config.user_agent,
        )
        logger.debug("request start method=%s endpoint=%s", method, request.endpoint)
        raw = await self._transport.send(
            method,
            url,
            headers=headers,
            body=body,
            timeout=request_timeout(request, self._config),
        )
        self._request_counter.increment()

        response = build_response(request, raw)
        log_and_raise_for_error(response)
        return response

    async def send_batch_request(
        self,
        requests: Sequence[GraphRequest] | Mapping[str, GraphRequest] | BatchRequest,
        access_token: AccessToken | str | None = None,
        graph_version: str | None = None,
    ) -> BatchResponse:
        if isinstance(requests, BatchRequest):
            batch_request = requests
        else:
            batch_request = BatchRequest(
                self._credentials,
                requests,
                access_token or self._default_access_token,
                graph_version or self.default_graph_version,
            )
        batch_request.prepare_requests_for_batch()
        return BatchResponse(batch_request, await self.send_request(batch_request))

    async def next(self, edge: GraphEdge) -> GraphEdge | None:
        return await self._pagination_results(edge, "next")

    async def previous(self, edge: GraphEdge) -> GraphEdge | None:
        return await self._pagination_results(edge, "previous")

    async def iter_pages(
        self,
        edge: GraphEdge,
        *,
        direction: str = "next",
        max_pages: int = 10_000,
    ) -> AsyncIterator[GraphEdge]:
        validate_direction(direction)
        subclass = edge.subclass_name

        async def fetch_page(request: GraphRequest) -> GraphEdge | None:
            return await self._fetch_page(request, subclass)

        async for page in aiterate_edge_pages(
            edge,
            fetch_page,
            direction=direction,
            max_pages=max_pages,
        ):
            self._ensure_open()
            yield page

    async def _pagination_results(self, edge: GraphEdge, direction: str) -> GraphEdge | None:
        self._ensure_open()
        request = edge.get_pagination_request(direction)
        if request is None:
            return None
        return await self._fetch_page(request, edge.subclass_name)

    async def _fetch_page(self, request: GraphRequest, subclass: NodeType) -> GraphEdge | None:
        response = await self.send_request(request)
        page = response.get_graph_edge(subclass)
        return page if len(page) > 0 else None

    def _ensure_open(self) -> None:
        if self._closed:
            raise GraphClientClosedError("AsyncGraphClient is already closed")

    async def close(self) -> None:
        if self._closed:
            return
        await self._transport.close()
        self._closed = True

    async def __aenter__(self) -> "AsyncGraphClient":
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False


__all__ = [
    "AsyncGraphClient",
]
