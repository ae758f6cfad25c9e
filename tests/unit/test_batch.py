from __future__ import annotations

import json

import pytest

from social_graph_client.core.auth import Credentials
from social_graph_client.core.batch import BatchRequest, BatchResponse
from social_graph_client.core.errors import (
    GraphBatchSizeError,
    GraphConfigurationError,
    GraphThrottleError,
)
from social_graph_client.core.request import GraphRequest
from social_graph_client.core.response import GraphResponse
from social_graph_client.core.uploads import UploadFile
from tests.shared.payloads import make_batch_item, make_error_payload

FOO_PROOF = "df4256903ba4e23636cc142117aa632133d75c642bd2a68955be1443bd14deb9"


@pytest.fixture
def batch(credentials) -> BatchRequest:
    return BatchRequest(credentials, access_token="foo_token", graph_version="v12.0")


def test_batch_is_post_to_root(batch):
    assert batch.method == "POST"
    assert batch.endpoint == ""
    assert batch.get_url() == "/v12.0"


def test_sub_requests_inherit_fallbacks(batch):
    request = GraphRequest(None, None, "GET", "/me")
    batch.add(request)

    assert request.credentials == Credentials("123", "foo_secret")
    assert request.access_token == "foo_token"


def test_sub_requests_keep_their_own_credentials(batch):
    own = Credentials("999", "other")
    request = GraphRequest(own, "bar_token", "GET", "/me")
    batch.add(request)

    assert request.credentials == own
    assert request.access_token == "bar_token"


@pytest.mark.parametrize(
    ("batch_credentials", "batch_token", "message"),
    [
        (None, "foo_token", "Missing credentials"),
        (Credentials("1", "s"), None, "Missing access token"),
    ],
    ids=["no-credentials", "no-token"],
)
def test_missing_fallback_is_configuration_error(batch_credentials, batch_token, message):
    batch = BatchRequest(batch_credentials, access_token=batch_token)
    with pytest.raises(GraphConfigurationError, match=message):
        batch.add(GraphRequest(None, None, "GET", "/me"))


def test_add_accepts_lists_mappings_and_names(batch):
    batch.add([GraphRequest(method="GET", endpoint="/a"), GraphRequest(method="GET", endpoint="/b")])
    batch.add({"named": GraphRequest(method="GET", endpoint="/c")})
    batch.add(GraphRequest(method="GET", endpoint="/d"), "short")
    batch.add(
        GraphRequest(method="GET", endpoint="/e"),
        {"name": "opts", "omit_response_on_success": False},
    )

    assert len(batch) == 5
    assert [entry.name for entry in batch] == [None, None, "named", "short", "opts"]
    assert batch[4].options == {"omit_response_on_success": False}
    assert [entry.request.endpoint for entry in batch.requests] == ["/a", "/b", "/c", "/d", "/e"]


def test_batch_size_is_validated_at_send_time(batch):
    with pytest.raises(GraphBatchSizeError, match="no batch requests"):
        batch.validate_batch_request_count()

    for index in range(51):
        batch.add(GraphRequest(method="GET", endpoint=f"/{index}"))
    with pytest.raises(GraphBatchSizeError, match="more than 50"):
        batch.prepare_requests_for_batch()


def test_request_entity_to_batch_dict_for_get(batch):
    request = GraphRequest(Credentials("123", "foo_secret"), "foo_token", "GET", "/foo", {"foo": "bar"})
    entry = batch.request_entity_to_batch_dict(request, "foo_name")

    assert entry["method"] == "GET"
    assert entry["relative_url"] == f"/foo?foo=bar&access_token=foo_token&appsecret_proof={FOO_PROOF}"
    assert entry["name"] == "foo_name"
    assert "body" not in entry
    assert "attached_files" not in entry
    assert "Accept-Encoding: *" in entry["headers"]
    assert all(": " in header for header in entry["headers"])


def test_request_entity_to_batch_dict_for_post_has_body(batch):
    request = GraphRequest(
        Credentials("123", "foo_secret"), "foo_token", "POST", "/bar", {"message": "hi"}, None, "v12.0"
    )
    entry = batch.request_entity_to_batch_dict(request, {"omit_response_on_success": False}, "f1,f2")

    assert entry["relative_url"] == "/v12.0/bar"
    assert entry["body"] == f"message=hi&access_token=foo_token&appsecret_proof={FOO_PROOF}"
    assert entry["omit_response_on_success"] is False
    assert entry["attached_files"] == "f1,f2"


def test_files_are_hoisted_to_the_batch(batch, upload_path):
    upload = UploadFile(upload_path)
    request = GraphRequest(method="POST", endpoint="/me/photos", params={"source": upload, "caption": "x"})
    batch.add(request, "photo")

    entry = batch[0]
    assert request.files == {}
    assert entry.attached_files is not None
    assert list(batch.files) == [entry.attached_files]
    assert batch.files[entry.attached_files] is upload
    assert batch.contains_file_uploads() is True


def test_same_file_added_twice_is_uploaded_twice(batch, upload_path):
    upload = UploadFile(upload_path)
    batch.add(GraphRequest(method="POST", endpoint="/a", params={"source": upload}))
    batch.add(GraphRequest(method="POST", endpoint="/b", params={"source": upload}))

    assert len(batch.files) == 2
    assert batch[0].attached_files != batch[1].attached_files


def test_prepare_requests_for_batch_sets_params(batch):
    batch.add(GraphRequest(method="GET", endpoint="/me"), "me")
    batch.add(GraphRequest(method="POST", endpoint="/me/feed", params={"message": "hi"}))
    batch.prepare_requests_for_batch()

    params = batch.get_params()
    assert params["include_headers"] is True
    entries = json.loads(params["batch"])
    assert [entry["method"] for entry in entries] == ["GET", "POST"]
    assert entries[0]["name"] == "me"
    assert entries[0]["relative_url"].startswith("/me?access_token=foo_token")
    assert "name" not in entries[1]
    assert entries[1]["body"].startswith("message=hi&access_token=foo_token")
    assert "include_headers=true" in batch.get_url_encoded_body().body()


def test_batch_response_demultiplexes_by_name_and_index(batch):
    first = GraphRequest(method="GET", endpoint="/me")
    second = GraphRequest(method="GET", endpoint="/me/photos")
    third = GraphRequest(method="POST", endpoint="/me/feed")
    batch.add(first, "me")
    batch.add(second)
    batch.add(third)

    body = json.dumps(
        [
            make_batch_item({"id": "1", "name": "Foo"}, headers={"ETag": '"abc"'}),
            make_batch_item({"data": [{"id": "p1"}]}),
            make_batch_item(make_error_payload(4), code=400),
        ]
    )
    response = BatchResponse(batch, GraphResponse(batch, body, 200, {"X-Batch": "1"}))

    assert list(response) == ["me", 1, 2]
    assert len(response) == 3
    assert response["me"].request is first
    assert response["me"].http_status_code == 200
    assert response["me"].etag == '"abc"'
    assert response["me"].get_graph_node()["name"] == "Foo"
    assert response[1].request is second
    assert len(response[1].get_graph_edge()) == 1
    assert response[2].request is third
    assert response[2].http_status_code == 400
    assert isinstance(response[2].thrown_exception, GraphThrottleError)
    with pytest.raises(GraphThrottleError):
        response[2].raise_for_error()

    assert response.is_error() is False
    assert response.headers == {"X-Batch": "1"}
    assert response.batch_request is batch
    assert set(response.responses) == {"me", 1, 2}


def test_batch_response_handles_omitted_items(batch):
    batch.add(
        GraphRequest(method="POST", endpoint="/me/feed"),
        {"name": "post", "omit_response_on_success": True},
    )
    response = BatchResponse(batch, GraphResponse(batch, "[null]", 200))

    item = response["post"]
    assert item.body is None
    assert item.http_status_code is None
    assert item.decoded_body == {}
    assert item.headers == {}


def test_batch_response_for_error_body_has_no_items(batch):
    batch.add(GraphRequest(method="GET", endpoint="/me"))
    response = BatchResponse(batch, GraphResponse(batch, json.dumps(make_error_payload(1)), 500))

    assert len(response) == 0
    assert response.is_error() is True
