"""Shared helpers for sync/async transport implementations."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from ..config import GraphClientConfig

RequestBody = str | bytes | None


@dataclass(slots=True, frozen=True)
class RawResponse:
    """Status, headers and body as received, before decoding."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: RequestBody,
        timeout: float,
    ) -> RawResponse: ...

    def close(self) -> None: ...


class AsyncTransportProtocol(Protocol):
    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: RequestBody,
        timeout: float,
    ) -> Awaitable[RawResponse]: ...

    async def close(self) -> None: ...


def build_default_headers(config: GraphClientConfig) -> Mapping[str, str]:
    return {
        "User-Agent": config.user_agent,
    }


def build_timeout(config: GraphClientConfig, timeout_seconds: float) -> httpx.Timeout:
    return httpx.Timeout(
        timeout_seconds,
        connect=min(config.transport.connect_timeout_seconds, timeout_seconds),
    )


def to_raw_response(response: httpx.Response) -> RawResponse:
    return RawResponse(
        status_code=response.status_code,
        headers=dict(response.headers.items()),
        body=response.text,
    )


def loggable_url(url: str) -> str:
    # Query strings carry access tokens.
    return url.split("?", 1)[0]


def encode_body(body: RequestBody) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    return body


__all__ = [
    "RequestBody",
    "RawResponse",
    "Transport",
    "AsyncTransportProtocol",
    "build_default_headers",
    "build_timeout",
    "to_raw_response",
    "encode_body",
    "loggable_url",
]
