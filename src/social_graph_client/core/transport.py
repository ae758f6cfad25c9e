"""Synchronous HTTP transport backed by httpx."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from ..config import GraphClientConfig
from .errors import GraphTransportError
from .transport_shared import (
    RawResponse,
    RequestBody,
    build_default_headers,
    build_timeout,
    encode_body,
    loggable_url,
    to_raw_response,
)

logger = logging.getLogger("social_graph_client")


class SyncTransport:
    """Sends one prepared request per call; no retries."""

    def __init__(
        self,
        config: GraphClientConfig,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._closed = False
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers=build_default_headers(config),
            timeout=build_timeout(config, config.transport.timeout_seconds),
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self._client.close()

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: RequestBody,
        timeout: float,
    ) -> RawResponse:
        if self._closed:
            raise GraphTransportError("transport is already closed")

        logger.debug("transport send method=%s url=%s", method, loggable_url(url))
        try:
            response = self._client.request(
                method,
                url,
                headers=dict(headers),
                content=encode_body(body),
                timeout=build_timeout(self._config, timeout),
            )
        except httpx.HTTPError as exc:
            logger.error(
                "transport error; giving up method=%s url=%s error=%s",
                method,
                loggable_url(url),
                exc.__class__.__name__,
            )
            raise GraphTransportError("network/transport error") from exc

        logger.debug(
            "transport response method=%s url=%s http_status=%s",
            method,
            loggable_url(url),
            response.status_code,
        )
        return to_raw_response(response)


__all__ = [
    "SyncTransport",
]
