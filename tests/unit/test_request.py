from __future__ import annotations

import pytest

from social_graph_client.config import DEFAULT_USER_AGENT
from social_graph_client.core.auth import AccessToken, Credentials, app_secret_proof
from social_graph_client.core.errors import GraphConfigurationError
from social_graph_client.core.request import GraphRequest
from social_graph_client.core.uploads import UploadFile, VideoFile

FOO_PROOF = "df4256903ba4e23636cc142117aa632133d75c642bd2a68955be1443bd14deb9"


def test_empty_request_defaults():
    request = GraphRequest()
    assert request.access_token is None
    assert request.method is None
    assert request.endpoint is None
    assert request.get_params() == {}
    assert request.files == {}


def test_method_is_uppercased_and_validated():
    request = GraphRequest(method="get")
    assert request.method == "GET"
    request.validate_method()

    with pytest.raises(GraphConfigurationError, match="not specified"):
        GraphRequest().validate_method()
    with pytest.raises(GraphConfigurationError, match="Invalid HTTP method"):
        GraphRequest(method="PUT").validate_method()


def test_access_token_entity_accepts_string_or_token():
    assert GraphRequest(access_token=AccessToken("foo")).access_token == "foo"
    assert GraphRequest(access_token="foo").access_token_entity() == AccessToken("foo")


def test_token_in_endpoint_is_harvested_and_stripped():
    request = GraphRequest(method="GET", endpoint="/foo?access_token=bar_token&x=1")
    assert request.access_token == "bar_token"
    assert request.endpoint == "/foo?x=1"


def test_token_in_params_is_harvested_and_stripped():
    request = GraphRequest(params={"access_token": "bar_token", "appsecret_proof": "p", "a": 1})
    assert request.access_token == "bar_token"
    assert request.get_params()["a"] == 1
    assert request.get_params()["appsecret_proof"] != "p"


@pytest.mark.parametrize(
    ("endpoint", "params"),
    [
        ("/foo?access_token=bar_token", None),
        ("/foo", {"access_token": "bar_token"}),
    ],
    ids=["endpoint", "params"],
)
def test_access_token_mismatch_raises(endpoint, params):
    with pytest.raises(GraphConfigurationError, match="Access token mismatch"):
        GraphRequest(None, "foo_token", "GET", endpoint, params)


def test_matching_token_in_endpoint_is_accepted():
    request = GraphRequest(None, "foo_token", "GET", "/foo?access_token=foo_token")
    assert request.endpoint == "/foo"


def test_validate_access_token():
    with pytest.raises(GraphConfigurationError, match="access token"):
        GraphRequest().validate_access_token()
    GraphRequest(access_token="x").validate_access_token()


def test_get_params_injects_token_and_proof(credentials):
    request = GraphRequest(credentials, "foo_token", "GET", "/foo", {"foo": "bar"})
    assert request.get_params() == {
        "foo": "bar",
        "access_token": "foo_token",
        "appsecret_proof": FOO_PROOF,
    }
    assert request.get_app_secret_proof() == FOO_PROOF


def test_proof_follows_token_and_credential_changes(credentials):
    request = GraphRequest(credentials, "foo_token", "GET", "/foo")
    assert request.get_params()["appsecret_proof"] == FOO_PROOF

    request.set_access_token("bar_token")
    bar_proof = app_secret_proof("foo_secret", "bar_token")
    assert request.get_app_secret_proof() == bar_proof
    assert request.get_params()["appsecret_proof"] == bar_proof
    assert bar_proof != FOO_PROOF

    request.set_credentials(Credentials("123", "other_secret"))
    other_proof = app_secret_proof("other_secret", "bar_token")
    assert request.get_params() == {"access_token": "bar_token", "appsecret_proof": other_proof}
    assert other_proof != bar_proof


def test_get_url_for_get_appends_params_in_insertion_order(credentials):
    request = GraphRequest(credentials, "foo_token", "GET", "/foo", {"foo": "bar"})
    assert request.get_url() == f"/foo?foo=bar&access_token=foo_token&appsecret_proof={FOO_PROOF}"


def test_get_url_for_post_carries_only_version_and_endpoint(credentials):
    request = GraphRequest(credentials, "foo_token", "POST", "bar", {"foo": "bar"}, None, "v0.0")
    assert request.get_url() == "/v0.0/bar"
    assert request.get_post_params()["foo"] == "bar"
    assert request.get_url_encoded_body().body() == (
        f"foo=bar&access_token=foo_token&appsecret_proof={FOO_PROOF}"
    )


def test_get_post_params_empty_for_get(credentials):
    request = GraphRequest(credentials, "foo_token", "GET", "/foo", {"foo": "bar"})
    assert request.get_post_params() == {}
    assert request.get_url_encoded_body().body() == ""


def test_get_url_merges_existing_query_sorted(credentials):
    request = GraphRequest(
        credentials,
        "foo_token",
        "GET",
        "/foo?z=1&b=2",
        {"a": "x", "z": "ignored"},
        None,
        "v1.0",
    )
    assert request.get_url() == (
        f"/v1.0/foo?a=x&access_token=foo_token&appsecret_proof={FOO_PROOF}&b=2&z=1"
    )


def test_headers_include_defaults_and_etag():
    request = GraphRequest(etag="abc")
    request.set_headers({"X-Custom": "1", "User-Agent": "overridden"})
    headers = request.get_headers()
    assert headers["X-Custom"] == "1"
    assert headers["User-Agent"] == DEFAULT_USER_AGENT
    assert headers["Accept-Encoding"] == "*"
    assert headers["If-None-Match"] == "abc"
    assert "If-None-Match" not in GraphRequest().get_headers()


def test_file_params_move_to_attachments(upload_path):
    upload = UploadFile(upload_path)
    video = VideoFile(upload_path)
    request = GraphRequest(method="POST", params={"message": "hi", "source": upload})

    assert request.files == {"source": upload}
    assert "source" not in request.get_params()
    assert request.contains_file_uploads() is True
    assert request.contains_video_uploads() is False

    request.add_file("video", video)
    assert request.contains_video_uploads() is True

    request.reset_files()
    assert request.contains_file_uploads() is False


def test_dangerously_set_params_keeps_token_keys():
    request = GraphRequest()
    request.dangerously_set_params({"access_token": "raw"})
    assert request.get_params() == {"access_token": "raw"}


def test_multipart_body_includes_params_and_files(credentials, upload_path):
    request = GraphRequest(
        credentials,
        "foo_token",
        "POST",
        "/me/photos",
        {"message": "hi", "source": UploadFile(upload_path)},
    )
    body = request.get_multipart_body().body()
    assert b'name="message"' in body
    assert b'name="access_token"' in body
    assert b'filename="foo.txt"' in body


def test_clone_is_independent(credentials, upload_path):
    request = GraphRequest(credentials, "foo_token", "GET", "/foo", {"nested": {"a": 1}})
    request.set_headers({"X-A": "1"})
    cloned = request.clone()

    cloned.set_params({"extra": "1"})
    cloned.set_headers({"X-B": "2"})
    cloned.add_file("source", UploadFile(upload_path))
    cloned.get_params()["nested"]["a"] = 2

    assert "extra" not in request.get_params()
    assert request.get_params()["nested"] == {"a": 1}
    assert "X-B" not in request.get_headers()
    assert request.files == {}
    assert cloned.credentials == Credentials("123", "foo_secret")
    assert cloned.access_token == "foo_token"
