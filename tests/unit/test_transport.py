from __future__ import annotations

import httpx
import pytest

from social_graph_client.core.errors import GraphTransportError
from social_graph_client.core.transport import SyncTransport
from social_graph_client.core.transport_shared import RawResponse, build_timeout
from tests.shared.transport import build_config


def _transport(handler) -> tuple[SyncTransport, httpx.Client]:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SyncTransport(build_config(), client=client), client


def test_send_returns_raw_response():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, headers={"ETag": '"abc"'}, text='{"id": "1"}')

    transport, _ = _transport(handler)
    raw = transport.send(
        "POST",
        "https://graph.facebook.com/v12.0/me/feed",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        body="message=hi",
        timeout=5.0,
    )

    assert isinstance(raw, RawResponse)
    assert raw.status_code == 200
    assert raw.body == '{"id": "1"}'
    assert raw.headers["etag"] == '"abc"'
    assert seen[0].method == "POST"
    assert seen[0].content == b"message=hi"
    assert seen[0].headers["content-type"] == "application/x-www-form-urlencoded"


def test_non_2xx_statuses_are_returned_not_raised():
    transport, _ = _transport(lambda request: httpx.Response(500, text='{"error": {"code": 1}}'))

    raw = transport.send("GET", "https://graph.facebook.com/v12.0/me", headers={}, body=None, timeout=5.0)

    assert raw.status_code == 500


def test_network_errors_become_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    transport, _ = _transport(handler)
    with pytest.raises(GraphTransportError) as info:
        transport.send("GET", "https://graph.facebook.com/v12.0/me", headers={}, body=None, timeout=5.0)
    assert isinstance(info.value.__cause__, httpx.ConnectError)


def test_send_after_close_is_transport_error():
    transport, client = _transport(lambda request: httpx.Response(200, text="{}"))
    transport.close()
    transport.close()

    with pytest.raises(GraphTransportError, match="already closed"):
        transport.send("GET", "https://graph.facebook.com/v12.0/me", headers={}, body=None, timeout=5.0)
    # Injected clients stay owned by the caller.
    assert client.is_closed is False
    client.close()


def test_transport_can_initialize_and_close_with_real_httpx_client():
    transport = SyncTransport(build_config())
    transport.close()


def test_build_timeout_caps_connect_timeout():
    timeout = build_timeout(build_config(), 5.0)
    assert timeout.read == 5.0
    assert timeout.connect == 5.0

    timeout = build_timeout(build_config(), 3600.0)
    assert timeout.read == 3600.0
    assert timeout.connect == 10.0
