"""Public client entrypoint."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping, Sequence
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
from .core.auth import AccessToken, Credentials
from .core.batch import BatchRequest, BatchResponse
from .core.errors import GraphClientClosedError
from .core.pagination import iterate_edge_pages, validate_direction
from .core.persistent_data import PersistentDataHandler, resolve_persistent_data_handler
from .core.request import GraphRequest
from .core.response import GraphResponse
from .core.resumable import ResumableUploader
from .core.transport import SyncTransport
from .core.transport_shared import Transport
from .core.uploads import TransferChunk, UploadFile, VideoFile
from .graph.edge import GraphEdge
from .graph.factory import NodeType

logger = logging.getLogger("social_graph_client")

Params = Mapping[str, Any] | None


class GraphClient:
    """Public Graph API client.

    Requests fall back to the configured default access token and graph
    version. Every non-batch send raises the classified API error when the
    response carries one.
    """

    def __init__(
        self,
        config: GraphClientConfig | None = None,
        *,
        transport: Transport | None = None,
        persistent_data_handler: PersistentDataHandler | str | None = None,
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
        self._transport = transport or SyncTransport(self._config)
        self._persistent_data_handler = resolve_persistent_data_handler(
            persistent_data_handler or self._config.persistent_data_handler
        )
        self._request_counter = request_counter or RequestCounter()
        self._last_response: GraphResponse | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def config(self) -> GraphClientConfig:
        return self._config

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
    def persistent_data_handler(self) -> PersistentDataHandler:
        return self._persistent_data_handler

    @property
    def request_counter(self) -> RequestCounter:
        return self._request_counter

    @property
    def last_response(self) -> GraphResponse | None:
        return self._last_response

    def base_graph_url(self, post_to_video_url: bool = False) -> str:
        return base_graph_url(
            enable_beta_mode=self._config.enable_beta_mode,
            post_to_video_url=post_to_video_url,
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphRequest:
        """Build a request with the client's credentials and defaults."""

        return GraphRequest(
            self._credentials,
            access_token or self._default_access_token,
            method,
            endpoint,
            params,
            etag,
            graph_version or self.default_graph_version,
        )

    def get(
        self,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphResponse:
        return self.send_request(
            self.request("GET", endpoint, params, access_token, etag, graph_version)
        )

    def post(
        self,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphResponse:
        return self.send_request(
            self.request("POST", endpoint, params, access_token, etag, graph_version)
        )

    def delete(
        self,
        endpoint: str,
        params: Params = None,
        access_token: AccessToken | str | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> GraphResponse:
        return self.send_request(
            self.request("DELETE", endpoint, params, access_token, etag, graph_version)
        )

    def send_request(self, request: GraphRequest) -> GraphResponse:
        self._ensure_open()
        if not isinstance(request, BatchRequest):
            request.validate_access_token()

        url, method, headers, body = prepare_request_message(
            request,
            self.base_graph_url(request.contains_video_uploads()),
            user_agent=self._config.user_agent,
        )
        logger.debug("request start method=%s endpoint=%s", method, request.endpoint)
        raw = self._transport.send(
            method,
            url,
            headers=headers,
            body=body,
            timeout=request_timeout(request, self._config),
        )
        self._request_counter.increment()

        response = build_response(request, raw)
        self._last_response = response
        log_and_raise_for_error(response)
        return response

    def send_batch_request(
        self,
        requests: Sequence[GraphRequest] | Mapping[str, GraphRequest] | BatchRequest,
        access_token: AccessToken | str | None = None,
        graph_version: str | None = None,
    ) -> BatchResponse:
        """Send up to 50 requests in one call.

        Sub-response errors are not raised; inspect each item's
        ``thrown_exception`` or call ``raise_for_error()`` on it.
        """

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

        response = BatchResponse(batch_request, self.send_request(batch_request))
        self._last_response = response
        return response

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def next(self, edge: GraphEdge) -> GraphEdge | None:
        return self._pagination_results(edge, "next")

    def previous(self, edge: GraphEdge) -> GraphEdge | None:
        return self._pagination_results(edge, "previous")

    def iter_pages(
        self,
        edge: GraphEdge,
        *,
        direction: str = "next",
        max_pages: int = 10_000,
    ) -> Iterator[GraphEdge]:
        """Yield ``edge`` and the pages after it; stops at the first empty page."""

        validate_direction(direction)
        subclass = edge.subclass_name
        iterator = iterate_edge_pages(
            edge,
            lambda request: self._fetch_page(request, subclass),
            direction=direction,
            max_pages=max_pages,
        )
        while True:
            self._ensure_open()
            try:
                page = next(iterator)
            except StopIteration:
                return
            yield page

    def _pagination_results(self, edge: GraphEdge, direction: str) -> GraphEdge | None:
        self._ensure_open()
        request = edge.get_pagination_request(direction)
        if request is None:
            return None
        return self._fetch_page(request, edge.subclass_name)

    def _fetch_page(self, request: GraphRequest, subclass: NodeType) -> GraphEdge | None:
        page = self.send_request(request).get_graph_edge(subclass)
        return page if len(page) > 0 else None

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    @staticmethod
    def file_to_upload(path: str | os.PathLike[str]) -> UploadFile:
        return UploadFile(path)

    @staticmethod
    def video_to_upload(path: str | os.PathLike[str]) -> VideoFile:
        return VideoFile(path)

    def upload_video(
        self,
        target: str,
        path: str | os.PathLike[str],
        metadata: Params = None,
        access_token: AccessToken | str | None = None,
        max_transfer_tries: int = 5,
        graph_version: str | None = None,
    ) -> dict[str, Any]:
        """Upload a video in chunks to ``/{target}/videos``.

        Each failed chunk is retried up to ``max_transfer_tries`` times.
        Returns ``{"video_id": ..., "success": ...}``.
        """

        self._ensure_open()
        uploader = ResumableUploader(
            self._credentials,
            self,
            access_token or self._default_access_token,
            graph_version or self.default_graph_version,
        )
        endpoint = f"/{target}/videos"
        chunk = uploader.start(endpoint, self.video_to_upload(path))

        while not chunk.is_last_chunk():
            chunk = self._transfer_with_retries(uploader, endpoint, chunk, max_transfer_tries)

        return {
            "video_id": chunk.video_id,
            "success": uploader.finish(endpoint, chunk.upload_session_id, metadata),
        }

    @staticmethod
    def _transfer_with_retries(
        uploader: ResumableUploader,
        endpoint: str,
        chunk: TransferChunk,
        retry_countdown: int,
    ) -> TransferChunk:
        while True:
            new_chunk = uploader.transfer(endpoint, chunk, retry_countdown < 1)
            if new_chunk is not chunk:
                return new_chunk
            retry_countdown -= 1

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise GraphClientClosedError("GraphClient is already closed")

    def close(self) -> None:
        if self._closed:
            return
        self._transport.close()
        self._closed = True

    def __enter__(self) -> "GraphClient":
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False


__all__ = [
    "GraphClient",
]
