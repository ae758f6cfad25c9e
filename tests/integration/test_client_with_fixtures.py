from __future__ import annotations

import pytest

from social_graph_client.client import GraphClient
from social_graph_client.core.errors import GraphAuthenticationError
from social_graph_client.core.transport import SyncTransport
from social_graph_client.graph import GraphPage, GraphPicture, GraphUser
from tests.shared.fixture_transports import FixtureGraphRouter, fixture_http_client
from tests.shared.transport import build_config


@pytest.fixture
def router(fixture_loader) -> FixtureGraphRouter:
    return FixtureGraphRouter(fixture_loader)


@pytest.fixture
def client(router):
    config = build_config()
    with GraphClient(config, transport=SyncTransport(config, client=fixture_http_client(router))) as graph:
        yield graph


def test_get_me_as_typed_user(client, router):
    response = client.get("/me", {"fields": "id,name,location,hometown,picture"})

    user = response.get_graph_node(GraphUser)
    assert isinstance(user, GraphUser)
    assert user.name == "Foo Bar"
    assert isinstance(user["location"], GraphPage)
    assert user["location"].name == "New York, New York"
    assert isinstance(user["picture"], GraphPicture)
    assert user["picture"].is_silhouette is False
    assert response.graph_version == "v12.0"
    assert router.requests[0].url.params["appsecret_proof"] == response.app_secret_proof


def test_feed_pages_are_followed_to_the_end(client, router):
    first = client.get("/10153242/feed", {"limit": 2}).get_graph_edge()

    messages = [post["message"] for page in client.iter_pages(first) for post in page]

    assert messages == ["first", "second", "third"]
    assert len(router.requests) == 2
    second_params = router.requests[1].url.params
    assert second_params["after"] == "Mg"
    assert second_params["limit"] == "2"
    assert second_params["access_token"] == "foo_token"


def test_previous_link_returns_to_first_page(client):
    first = client.get("/10153242/feed", {"limit": 2}).get_graph_edge()
    second = client.next(first)

    assert second is not None
    assert second.previous_cursor == "Mw"
    back = client.previous(second)
    assert back is not None
    assert [post["id"] for post in back] == ["10153242_1", "10153242_2"]


def test_expired_token_is_authentication_error(client):
    with pytest.raises(GraphAuthenticationError) as info:
        client.get("/expired")

    assert info.value.sub_error_code == 463
    assert info.value.http_status_code == 400
    assert "Session has expired" in str(info.value)


def test_batch_mixes_successes_and_errors(client, router):
    response = client.send_batch_request(
        {
            "me": client.request("GET", "/me"),
            "feed": client.request("GET", "/10153242/feed", {"limit": 2}),
            "bad": client.request("GET", "/expired"),
        }
    )

    assert len(router.requests) == 1
    assert response["me"].get_graph_node(GraphUser).name == "Foo Bar"
    feed = response["feed"].get_graph_edge()
    assert len(feed) == 2
    assert feed.next_cursor == "Mg"
    assert isinstance(response["bad"].thrown_exception, GraphAuthenticationError)
    assert response["bad"].http_status_code == 400
    assert response["me"].get_header("content-type") == "application/json"
