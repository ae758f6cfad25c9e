"""Shared helpers for sync/async client bootstrap and request preparation."""

from __future__ import annotations

import logging
import threading

from .config import GraphClientConfig
from .core.errors import GraphConfigurationError
from .core.request import GraphRequest
from .core.response import GraphResponse
from .core.transport_shared import RawResponse, RequestBody

BASE_GRAPH_URL = "https://graph.facebook.com"
BASE_GRAPH_VIDEO_URL = "https://graph-video.facebook.com"
BASE_GRAPH_URL_BETA = "https://graph.beta.facebook.com"
BASE_GRAPH_VIDEO_URL_BETA = "https://graph-video.beta.facebook.com"

logger = logging.getLogger("social_graph_client")


class RequestCounter:
    """Monotonic count of requests sent; informational only."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0


def validate_client_config(config: GraphClientConfig) -> None:
    try:
        config.validate()
    except ValueError as exc:
        raise GraphConfigurationError(str(exc)) from exc


def base_graph_url(*, enable_beta_mode: bool, post_to_video_url: bool = False) -> str:
    if post_to_video_url:
        return BASE_GRAPH_VIDEO_URL_BETA if enable_beta_mode else BASE_GRAPH_VIDEO_URL
    return BASE_GRAPH_URL_BETA if enable_beta_mode else BASE_GRAPH_URL


def prepare_request_message(
    request: GraphRequest,
    base_url: str,
    *,
    user_agent: str | None = None,
) -> tuple[str, str, dict[str, str], RequestBody]:
    """Resolve the absolute URL, headers and body of a request.

    Requests with attached files become multipart; all others are sent
    url-encoded. The chosen ``Content-Type`` is stored on the request.
    """

    url = base_url + request.get_url()

    body: RequestBody
    if request.contains_file_uploads():
        multipart = request.get_multipart_body()
        request.set_headers({"Content-Type": multipart.content_type})
        body = multipart.body()
    else:
        url_encoded = request.get_url_encoded_body()
        request.set_headers({"Content-Type": url_encoded.content_type})
        body = url_encoded.body()

    headers = request.get_headers()
    if user_agent:
        headers["User-Agent"] = user_agent
    return url, str(request.method), headers, body


def request_timeout(request: GraphRequest, config: GraphClientConfig) -> float:
    if request.contains_file_uploads():
        return config.transport.video_upload_timeout_seconds
    return config.transport.timeout_seconds


def build_response(request: GraphRequest, raw: RawResponse) -> GraphResponse:
    return GraphResponse(request, raw.body, raw.status_code, raw.headers)


def log_and_raise_for_error(response: GraphResponse) -> None:
    error = response.thrown_exception
    if error is None:
        logger.info(
            "request success method=%s endpoint=%s http_status=%s",
            response.request.method,
            response.request.endpoint,
            response.http_status_code,
        )
        return
    logger.error(
        "request failed method=%s endpoint=%s http_status=%s kind=%s code=%s",
        response.request.method,
        response.request.endpoint,
        response.http_status_code,
        error.kind,
        error.code,
    )
    raise error


__all__ = [
    "BASE_GRAPH_URL",
    "BASE_GRAPH_VIDEO_URL",
    "BASE_GRAPH_URL_BETA",
    "BASE_GRAPH_VIDEO_URL_BETA",
    "RequestCounter",
    "validate_client_config",
    "base_graph_url",
    "prepare_request_message",
    "request_timeout",
    "build_response",
    "log_and_raise_for_error",
]
