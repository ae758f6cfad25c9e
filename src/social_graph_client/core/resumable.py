"""Chunked (resumable) video upload."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from .auth import AccessToken, Credentials
from .errors import GraphResumableUploadError, GraphShapeError
from .request import GraphRequest
from .response import GraphResponse
from .uploads import TransferChunk, UploadFile

logger = logging.getLogger("social_graph_client")


class RequestSender(Protocol):
    def send_request(self, request: GraphRequest) -> GraphResponse: ...


def _int_field(payload: Mapping[str, Any], name: str) -> int:
    try:
        return int(payload[name])
    except (KeyError, TypeError, ValueError) as exc:
        raise GraphShapeError(f"Upload response is missing a valid {name!r}") from exc


class ResumableUploader:
    """Runs the start/transfer/finish upload phases against one endpoint."""

    def __init__(
        self,
        credentials: Credentials,
        client: RequestSender,
        access_token: AccessToken | str | None,
        graph_version: str,
    ) -> None:
        self._credentials = credentials
        self._client = client
        self._access_token = access_token
        self._graph_version = graph_version

    def start(self, endpoint: str, file: UploadFile) -> TransferChunk:
        response = self._send_upload_request(
            endpoint,
            {"upload_phase": "start", "file_size": file.size()},
        )
        return TransferChunk(
            file,
            _int_field(response, "upload_session_id"),
            _int_field(response, "video_id"),
            _int_field(response, "start_offset"),
            _int_field(response, "end_offset"),
        )

    def transfer(
        self,
        endpoint: str,
        chunk: TransferChunk,
        allow_to_throw: bool = False,
    ) -> TransferChunk:
        """Send one chunk.

        On a resumable upload error the same chunk is returned so the caller
        can retry it, unless ``allow_to_throw`` is set.
        """

        params = {
            "upload_phase": "transfer",
            "upload_session_id": chunk.upload_session_id,
            "start_offset": chunk.start_offset,
            "video_file_chunk": chunk.partial_file(),
        }
        try:
            response = self._send_upload_request(endpoint, params)
        except GraphResumableUploadError as exc:
            if allow_to_throw:
                raise
            logger.warning(
                "chunk transfer failed; will retry endpoint=%s start_offset=%s subcode=%s",
                endpoint,
                chunk.start_offset,
                exc.sub_error_code,
            )
            return chunk

        return TransferChunk(
            chunk.file,
            chunk.upload_session_id,
            chunk.video_id,
            _int_field(response, "start_offset"),
            _int_field(response, "end_offset"),
        )

    def finish(
        self,
        endpoint: str,
        upload_session_id: int | str,
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        params = dict(metadata or {})
        params.update({"upload_phase": "finish", "upload_session_id": upload_session_id})
        response = self._send_upload_request(endpoint, params)
        return bool(response.get("success", False))

    def _send_upload_request(self, endpoint: str, params: Mapping[str, Any]) -> Mapping[str, Any]:
        request = GraphRequest(
            self._credentials,
            self._access_token,
            "POST",
            endpoint,
            params,
            None,
            self._graph_version,
        )
        decoded = self._client.send_request(request).decoded_body
        if not isinstance(decoded, Mapping):
            raise GraphShapeError("Upload response is not an object")
        return decoded


__all__ = [
    "RequestSender",
    "ResumableUploader",
]
