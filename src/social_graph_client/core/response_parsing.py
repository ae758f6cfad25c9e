"""Normalization of raw response bodies."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import parse_qsl

DecodedBody = dict[str, Any] | list[Any]


def _to_text(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def _is_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return text.strip() != ""


def decode_body(raw: str | bytes | None) -> DecodedBody:
    """Normalize a raw body into a JSON-like value.

    The API answers with JSON, with url-encoded key/value pairs (token
    exchange endpoints), or with a bare id.
    """

    if raw is None:
        return {}

    text = _to_text(raw)
    try:
        decoded = json.loads(text)
    except ValueError:
        # Not JSON; fall through to the key/value forms below.
        pass
    else:
        if isinstance(decoded, bool):
            return {"success": decoded}
        if isinstance(decoded, (int, float)):
            return {"id": decoded}
        if isinstance(decoded, (dict, list)):
            return decoded

    if _is_numeric(text):
        return {"id": text.strip()}
    return dict(parse_qsl(text, keep_blank_values=True))


def is_error_body(decoded_body: object) -> bool:
    return isinstance(decoded_body, Mapping) and "error" in decoded_body


def normalize_batch_headers(batch_headers: Iterable[Mapping[str, Any]] | None) -> dict[str, str]:
    """Turn ``[{"name": ..., "value": ...}]`` into a flat mapping."""

    headers: dict[str, str] = {}
    for header in batch_headers or ():
        if not isinstance(header, Mapping) or "name" not in header:
            continue
        headers[str(header["name"])] = str(header.get("value", ""))
    return headers


__all__ = [
    "DecodedBody",
    "decode_body",
    "is_error_body",
    "normalize_batch_headers",
]
