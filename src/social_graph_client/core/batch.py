"""Batch requests: many sub-requests in one POST, demultiplexed on return."""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .auth import AccessToken, Credentials
from .errors import GraphBatchSizeError, GraphConfigurationError
from .request import GraphRequest
from .response import GraphResponse
from .response_parsing import normalize_batch_headers

MAX_BATCH_REQUESTS = 50

BatchOptions = Mapping[str, Any] | str | None


@dataclass(slots=True)
class BatchEntry:
    """One queued sub-request with its batch options."""

    request: GraphRequest
    name: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    attached_files: str | None = None


def _normalize_options(options: BatchOptions) -> dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, str):
        return {"name": options}
    return dict(options)


class BatchRequest(GraphRequest):
    """A POST to the root endpoint carrying up to 50 sub-requests.

    Sub-requests without credentials or a token inherit the batch's own.
    Their file uploads are moved to the batch so they travel once, in the
    multipart root.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        requests: Sequence[GraphRequest] | Mapping[str, GraphRequest] | None = None,
        access_token: AccessToken | str | None = None,
        graph_version: str | None = None,
    ) -> None:
        super().__init__(credentials, access_token, "POST", "", {}, None, graph_version)
        self._requests: list[BatchEntry] = []
        if requests:
            self.add(requests)

    def add(
        self,
        request: GraphRequest | Sequence[GraphRequest] | Mapping[str, GraphRequest],
        options: BatchOptions = None,
    ) -> "BatchRequest":
        """Queue one request, a list of requests, or a ``{name: request}`` mapping.

        A string ``options`` is shorthand for ``{"name": options}``.
        """

        if isinstance(request, Mapping):
            for name, sub_request in request.items():
                self.add(sub_request, str(name))
            return self
        if not isinstance(request, GraphRequest):
            for sub_request in request:
                self.add(sub_request)
            return self

        resolved = _normalize_options(options)
        self.add_fallback_defaults(request)
        attached_files = self.extract_file_attachments(request)

        name = resolved.pop("name", None)
        self._requests.append(
            BatchEntry(
                request=request,
                name=str(name) if name is not None else None,
                options=resolved,
                attached_files=attached_files,
            )
        )
        return self

    def add_fallback_defaults(self, request: GraphRequest) -> None:
        if request.credentials is None:
            if self.credentials is None:
                raise GraphConfigurationError(
                    "Missing credentials on request and no fallback detected on batch request."
                )
            request.set_credentials(self.credentials)

        if request.access_token is None:
            if self.access_token is None:
                raise GraphConfigurationError(
                    "Missing access token on request and no fallback detected on batch request."
                )
            request.set_access_token(self.access_token)

    def extract_file_attachments(self, request: GraphRequest) -> str | None:
        """Hoist the request's files to the batch; returns the comma-joined names."""

        if not request.contains_file_uploads():
            return None

        file_names: list[str] = []
        for upload in request.files.values():
            file_name = uuid.uuid4().hex
            self.add_file(file_name, upload)
            file_names.append(file_name)

        request.reset_files()
        return ",".join(file_names)

    @property
    def requests(self) -> list[BatchEntry]:
        return list(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __getitem__(self, index: int) -> BatchEntry:
        return self._requests[index]

    def __iter__(self) -> Iterator[BatchEntry]:
        return iter(self._requests)

    def validate_batch_request_count(self) -> None:
        count = len(self._requests)
        if count == 0:
            raise GraphBatchSizeError("There are no batch requests to send.")
        if count > MAX_BATCH_REQUESTS:
            raise GraphBatchSizeError(
                f"You cannot send more than {MAX_BATCH_REQUESTS} batch requests at a time."
            )

    def prepare_requests_for_batch(self) -> None:
        self.validate_batch_request_count()
        self.set_params(
            {
                "batch": self.convert_requests_to_json(),
                "include_headers": True,
            }
        )

    def convert_requests_to_json(self) -> str:
        entries = []
        for entry in self._requests:
            options: dict[str, Any] = {}
            if entry.name is not None:
                options["name"] = entry.name
            for key, value in entry.options.items():
                options.setdefault(key, value)
            entries.append(
                self.request_entity_to_batch_dict(entry.request, options, entry.attached_files)
            )
        return json.dumps(entries, separators=(",", ":"))

    def request_entity_to_batch_dict(
        self,
        request: GraphRequest,
        options: BatchOptions = None,
        attached_files: str | None = None,
    ) -> dict[str, Any]:
        resolved = _normalize_options(options)
        batch: dict[str, Any] = {
            "headers": [f"{name}: {value}" for name, value in request.get_headers().items()],
            "method": request.method,
            "relative_url": request.get_url(),
        }

        # Files live on the batch root, so sub-requests are always url-encoded.
        body = request.get_url_encoded_body().body()
        if body:
            batch["body"] = body

        for key, value in resolved.items():
            batch.setdefault(key, value)

        if attached_files is not None:
            batch["attached_files"] = attached_files
        return batch


class BatchResponse(GraphResponse, Mapping[int | str, GraphResponse]):
    """Response to a batch, split into one response per sub-request.

    Items are keyed by the sub-request name, or by position when unnamed.
    """

    def __init__(self, batch_request: BatchRequest, response: GraphResponse) -> None:
        self._batch_request = batch_request
        self._responses: dict[int | str, GraphResponse] = {}
        super().__init__(
            response.request,
            response.body,
            response.http_status_code,
            response.headers,
        )
        self.set_responses(self.decoded_body)

    @property
    def batch_request(self) -> BatchRequest:
        return self._batch_request

    @property
    def responses(self) -> dict[int | str, GraphResponse]:
        return dict(self._responses)

    def set_responses(self, responses: object) -> None:
        self._responses = {}
        if not isinstance(responses, list):
            return
        for index, item in enumerate(responses):
            self.add_response(index, item)

    def add_response(self, index: int, item: Mapping[str, Any] | None) -> None:
        entry = self._batch_request[index] if index < len(self._batch_request) else None
        key: int | str = entry.name if entry is not None and entry.name is not None else index
        original_request = entry.request if entry is not None else GraphRequest()

        # Items are null when the sub-request was sent with omit_response_on_success.
        item = item or {}
        body = item.get("body")
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        code = item.get("code")

        self._responses[key] = GraphResponse(
            original_request,
            body,
            int(code) if code is not None else None,
            normalize_batch_headers(item.get("headers")),
        )

    def __getitem__(self, key: int | str) -> GraphResponse:
        return self._responses[key]

    def __iter__(self) -> Iterator[int | str]:
        return iter(self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    # Identity semantics, like GraphResponse.
    __eq__ = object.__eq__
    __hash__ = object.__hash__


__all__ = [
    "MAX_BATCH_REQUESTS",
    "BatchEntry",
    "BatchRequest",
    "BatchResponse",
]
