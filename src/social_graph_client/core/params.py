"""Request parameter encoding: query strings, url-encoded and multipart bodies."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from .uploads import UploadFile

ParamPairs = list[tuple[str, str]]


def _scalar_to_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _flatten(prefix: str, value: object, out: ParamPairs) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, nested in value.items():
            _flatten(f"{prefix}[{key}]", nested, out)
        return
    if isinstance(value, (list, tuple)):
        for index, nested in enumerate(value):
            _flatten(f"{prefix}[{index}]", nested, out)
        return
    out.append((prefix, _scalar_to_text(value)))


def flatten_params(params: Mapping[str, object] | Iterable[tuple[str, object]]) -> ParamPairs:
    """Flatten nested params into ``key[sub]`` pairs; ``None`` values are dropped."""

    items = params.items() if isinstance(params, Mapping) else params
    out: ParamPairs = []
    for key, value in items:
        _flatten(str(key), value, out)
    return out


def build_query(params: Mapping[str, object] | Iterable[tuple[str, object]]) -> str:
    return urlencode(flatten_params(params))


class RequestBodyUrlEncoded:
    """application/x-www-form-urlencoded body."""

    content_type = "application/x-www-form-urlencoded"

    def __init__(self, params: Mapping[str, object] | None = None) -> None:
        self._params = dict(params or {})

    def body(self) -> str:
        return build_query(self._params)


class RequestBodyMultipart:
    """multipart/form-data body with one part per param and per file."""

    def __init__(
        self,
        params: Mapping[str, object] | None = None,
        files: Mapping[str, "UploadFile"] | None = None,
        boundary: str | None = None,
    ) -> None:
        self._params = dict(params or {})
        self._files = dict(files or {})
        self.boundary = boundary or uuid.uuid4().hex

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def body(self) -> bytes:
        chunks: list[bytes] = []
        for name, value in flatten_params(self._params):
            chunks.append(self._param_part(name, value))
        for name, upload in self._files.items():
            chunks.append(self._file_part(name, upload))
        chunks.append(f"--{self.boundary}--\r\n".encode("utf-8"))
        return b"".join(chunks)

    def _param_part(self, name: str, value: str) -> bytes:
        return (
            f"--{self.boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
            f"{value}\r\n"
        ).encode("utf-8")

    def _file_part(self, name: str, upload: "UploadFile") -> bytes:
        head = (
            f"--{self.boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"; filename="{upload.file_name}"'
            f"\r\nContent-Type: {upload.mimetype}\r\n\r\n"
        ).encode("utf-8")
        return head + upload.contents() + b"\r\n"


__all__ = [
    "flatten_params",
    "build_query",
    "RequestBodyUrlEncoded",
    "RequestBodyMultipart",
]
