"""Error types and remote error classification."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .response import GraphResponse

_UNKNOWN_ERROR_MESSAGE = "Unknown error from Graph."

AUTHENTICATION_SUBCODES = frozenset({458, 459, 460, 463, 464, 467})
RESUMABLE_UPLOAD_SUBCODES = frozenset({1363030, 1363019, 1363037, 1363033, 1363021, 1363041})
AUTHENTICATION_CODES = frozenset({100, 102, 190})
SERVER_CODES = frozenset({1, 2})
THROTTLE_CODES = frozenset({4, 17, 32, 341, 613})
CLIENT_CODES = frozenset({506})


def _to_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


class GraphSDKError(Exception):
    """Base exception for this package."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class GraphConfigurationError(GraphSDKError):
    """Caller misuse: missing or mismatched token, bad method, bad settings."""


class GraphBatchSizeError(GraphConfigurationError):
    """Raised when a batch holds zero or more than the allowed sub-requests."""


class GraphShapeError(GraphSDKError):
    """Decoded payload does not have the expected node/edge shape."""


class GraphPaginationError(GraphSDKError):
    """Pagination is not possible for this edge."""


class GraphTransportError(GraphSDKError):
    """Network/transport-level failure."""


class GraphClientClosedError(GraphSDKError):
    """Raised when client is used after close."""


class GraphFileError(GraphSDKError):
    """An upload file cannot be opened or read."""


class GraphResponseError(GraphSDKError):
    """An error payload returned by the remote API."""

    kind = "other"

    def __init__(self, response: "GraphResponse", message: str | None = None) -> None:
        self.response = response
        self.response_data: dict[str, Any] = _error_payload(response.decoded_body)
        error = self.response_data.get("error", {})
        resolved_message = message or str(error.get("message", _UNKNOWN_ERROR_MESSAGE))
        code = _to_int(error.get("code"))
        super().__init__(resolved_message, code=code if code is not None else -1)
        self.message = resolved_message

    @property
    def http_status_code(self) -> int | None:
        return self.response.http_status_code

    @property
    def sub_error_code(self) -> int:
        subcode = _to_int(self.response_data.get("error", {}).get("error_subcode"))
        return subcode if subcode is not None else -1

    @property
    def error_type(self) -> str:
        return str(self.response_data.get("error", {}).get("type", ""))

    @property
    def raw_response(self) -> str | None:
        return self.response.body


class GraphAuthenticationError(GraphResponseError):
    """Invalid, expired or revoked credentials."""

    kind = "authentication"


class GraphAuthorizationError(GraphResponseError):
    """Missing permissions."""

    kind = "authorization"


class GraphThrottleError(GraphResponseError):
    """Rate limited by the remote API."""

    kind = "throttle"


class GraphServerError(GraphResponseError):
    """Transient remote server failure."""

    kind = "server"


class GraphClientError(GraphResponseError):
    """Request rejected as a client-side duplicate or misuse."""

    kind = "client"


class GraphResumableUploadError(GraphResponseError):
    """A chunk transfer failed in a way that can be retried."""

    kind = "resumable_upload"


class GraphOtherError(GraphResponseError):
    """Any error that does not match a known code."""

    kind = "other"


def _error_payload(decoded_body: object) -> dict[str, Any]:
    if not isinstance(decoded_body, Mapping):
        return {"error": {}}
    data = dict(decoded_body)
    error = data.get("error")
    if not (isinstance(error, Mapping) and "code" in error) and "code" in data:
        return {"error": data}
    if not isinstance(error, Mapping):
        data["error"] = {}
    else:
        data["error"] = dict(error)
    return data


def classify_api_error(response: "GraphResponse") -> GraphResponseError:
    """Map an error payload to the matching exception, without raising it."""

    error = _error_payload(response.decoded_body)["error"]
    code = _to_int(error.get("code"))
    subcode = _to_int(error.get("error_subcode"))

    if subcode in AUTHENTICATION_SUBCODES:
        return GraphAuthenticationError(response)
    if subcode in RESUMABLE_UPLOAD_SUBCODES:
        return GraphResumableUploadError(response)

    if code in AUTHENTICATION_CODES:
        return GraphAuthenticationError(response)
    if code in SERVER_CODES:
        return GraphServerError(response)
    if code in THROTTLE_CODES:
        return GraphThrottleError(response)
    if code in CLIENT_CODES:
        return GraphClientError(response)

    # Missing permissions
    if code == 10 or (code is not None and 200 <= code <= 299):
        return GraphAuthorizationError(response)

    if error.get("type") == "OAuthException":
        return GraphAuthenticationError(response)

    return GraphOtherError(response)


__all__ = [
    "GraphSDKError",
    "GraphConfigurationError",
    "GraphBatchSizeError",
    "GraphShapeError",
    "GraphPaginationError",
    "GraphTransportError",
    "GraphClientClosedError",
    "GraphFileError",
    "GraphResponseError",
    "GraphAuthenticationError",
    "GraphAuthorizationError",
    "GraphThrottleError",
    "GraphServerError",
    "GraphClientError",
    "GraphResumableUploadError",
    "GraphOtherError",
    "classify_api_error",
]
