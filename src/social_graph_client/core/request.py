"""Mutable description of a single Graph API call."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ..config import DEFAULT_USER_AGENT
from .auth import AccessToken, Credentials
from .errors import GraphConfigurationError
from .params import RequestBodyMultipart, RequestBodyUrlEncoded
from .uploads import UploadFile, VideoFile
from .url import (
    append_params_to_url,
    force_slash_prefix,
    get_params_as_dict,
    remove_params_from_url,
)

ALLOWED_METHODS = ("GET", "POST", "DELETE")
AUTH_PARAMS = ("access_token", "appsecret_proof")


class GraphRequest:
    """Method, endpoint, params, headers and files of one call.

    ``access_token`` and ``appsecret_proof`` are never kept in the params
    mapping; :meth:`get_params` derives them from the token on every call.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        access_token: AccessToken | str | None = None,
        method: str | None = None,
        endpoint: str | None = None,
        params: Mapping[str, Any] | None = None,
        etag: str | None = None,
        graph_version: str | None = None,
    ) -> None:
        self._credentials = credentials
        self._access_token: str | None = None
        self._method: str | None = None
        self._endpoint: str | None = None
        self._headers: dict[str, str] = {}
        self._params: dict[str, Any] = {}
        self._files: dict[str, UploadFile] = {}
        self._etag: str | None = None
        self._graph_version = graph_version

        self.set_access_token(access_token)
        self.set_method(method)
        self.set_endpoint(endpoint)
        self.set_params(params or {})
        self.set_etag(etag)

    # ------------------------------------------------------------------
    # Credentials and token
    # ------------------------------------------------------------------

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    def set_credentials(self, credentials: Credentials | None) -> None:
        self._credentials = credentials

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def set_access_token(self, access_token: AccessToken | str | None) -> "GraphRequest":
        self._access_token = access_token.value if isinstance(access_token, AccessToken) else access_token
        return self

    def set_access_token_from_params(self, access_token: str) -> "GraphRequest":
        """Adopt a token found in a URL or params; it must match any existing one."""

        existing = self._access_token
        if existing is None:
            self.set_access_token(access_token)
        elif access_token != existing:
            raise GraphConfigurationError(
                "Access token mismatch. The access token provided in the request and the one "
                "provided in the URL or params do not match."
            )
        return self

    def access_token_entity(self) -> AccessToken | None:
        return AccessToken(self._access_token) if self._access_token is not None else None

    def get_app_secret_proof(self) -> str | None:
        token = self.access_token_entity()
        if token is None:
            return None
        secret = self._credentials.secret if self._credentials is not None else ""
        return token.app_secret_proof(secret)

    def validate_access_token(self) -> None:
        if self._access_token is None:
            raise GraphConfigurationError("You must provide an access token.")

    # ------------------------------------------------------------------
    # Method and endpoint
    # ------------------------------------------------------------------

    @property
    def method(self) -> str | None:
        return self._method

    def set_method(self, method: str | None) -> None:
        if method is not None:
            self._method = method.upper()

    def validate_method(self) -> None:
        if not self._method:
            raise GraphConfigurationError("HTTP method not specified.")
        if self._method not in ALLOWED_METHODS:
            raise GraphConfigurationError("Invalid HTTP method specified.")

    @property
    def endpoint(self) -> str | None:
        # Empty for batch requests.
        return self._endpoint

    def set_endpoint(self, endpoint: str | None) -> "GraphRequest":
        if endpoint is None:
            return self

        params = get_params_as_dict(endpoint)
        if "access_token" in params:
            self.set_access_token_from_params(params["access_token"])

        self._endpoint = remove_params_from_url(endpoint, AUTH_PARAMS)
        return self

    @property
    def graph_version(self) -> str | None:
        return self._graph_version

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    @staticmethod
    def default_headers() -> dict[str, str]:
        return {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept-Encoding": "*",
        }

    def get_headers(self) -> dict[str, str]:
        headers = dict(self._headers)
        headers.update(self.default_headers())
        if self._etag:
            headers["If-None-Match"] = self._etag
        return headers

    def set_headers(self, headers: Mapping[str, str]) -> None:
        self._headers.update(headers)

    @property
    def etag(self) -> str | None:
        return self._etag

    def set_etag(self, etag: str | None) -> None:
        self._etag = etag

    # ------------------------------------------------------------------
    # Params and files
    # ------------------------------------------------------------------

    def set_params(self, params: Mapping[str, Any]) -> "GraphRequest":
        params = dict(params)
        if params.get("access_token") is not None:
            self.set_access_token_from_params(str(params["access_token"]))

        for key in AUTH_PARAMS:
            params.pop(key, None)

        self.dangerously_set_params(self.sanitize_file_params(params))
        return self

    def dangerously_set_params(self, params: Mapping[str, Any]) -> "GraphRequest":
        """Merge params without stripping tokens or files."""

        self._params.update(params)
        return self

    def sanitize_file_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Move file-valued params to the attachment store."""

        kept: dict[str, Any] = {}
        for key, value in params.items():
            if isinstance(value, UploadFile):
                self.add_file(key, value)
            else:
                kept[key] = value
        return kept

    def add_file(self, key: str, upload: UploadFile) -> None:
        self._files[key] = upload

    def reset_files(self) -> None:
        self._files = {}

    @property
    def files(self) -> dict[str, UploadFile]:
        return dict(self._files)

    def contains_file_uploads(self) -> bool:
        return bool(self._files)

    def contains_video_uploads(self) -> bool:
        return any(isinstance(upload, VideoFile) for upload in self._files.values())

    def get_params(self) -> dict[str, Any]:
        params = dict(self._params)
        if self._access_token is not None:
            params["access_token"] = self._access_token
            params["appsecret_proof"] = self.get_app_secret_proof()
        return params

    def get_post_params(self) -> dict[str, Any]:
        if self._method == "POST":
            return self.get_params()
        return {}

    def get_multipart_body(self) -> RequestBodyMultipart:
        return RequestBodyMultipart(self.get_post_params(), self._files)

    def get_url_encoded_body(self) -> RequestBodyUrlEncoded:
        return RequestBodyUrlEncoded(self.get_post_params())

    # ------------------------------------------------------------------
    # URL
    # ------------------------------------------------------------------

    def get_url(self) -> str:
        self.validate_method()

        url = force_slash_prefix(self._graph_version) + force_slash_prefix(self._endpoint)
        if self._method != "POST":
            url = append_params_to_url(url, self.get_params())
        return url

    def clone(self) -> "GraphRequest":
        """Copy with independent param, header and file maps."""

        cloned = copy.copy(self)
        cloned._headers = dict(self._headers)
        cloned._params = copy.deepcopy(self._params)
        cloned._files = dict(self._files)
        return cloned

    def __repr__(self) -> str:
        return f"GraphRequest(method={self._method!r}, endpoint={self._endpoint!r})"


__all__ = [
    "ALLOWED_METHODS",
    "GraphRequest",
]
