"""URL helpers: token stripping, param merging and pagination link trimming."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl, urlsplit

from .params import build_query

_GRAPH_BASE_URL_RE = re.compile(r"^https?://[^/?#]+(?:/v\d+(?:\.\d+)?(?=[/?#]|$))?/?")


def _query_pairs(query: str) -> list[tuple[str, str]]:
    return parse_qsl(query, keep_blank_values=True)


def remove_params_from_url(url: str, params_to_filter: Iterable[str]) -> str:
    """Drop the named query params, keeping the order of the others."""

    parts = urlsplit(url)
    filtered = set(params_to_filter)

    query = ""
    if parts.query:
        kept = [(key, value) for key, value in _query_pairs(parts.query) if key not in filtered]
        if kept:
            query = "?" + build_query(kept)

    scheme = f"{parts.scheme}://" if parts.scheme else ""
    fragment = f"#{parts.fragment}" if parts.fragment else ""
    return f"{scheme}{parts.netloc}{parts.path}{query}{fragment}"


def append_params_to_url(url: str, new_params: Mapping[str, object] | None = None) -> str:
    """Append params; on merge the URL's own params win and keys are sorted."""

    if not new_params:
        return url

    if "?" not in url:
        return f"{url}?{build_query(new_params)}"

    path, query = url.split("?", 1)
    merged: dict[str, object] = dict(new_params)
    merged.update(dict(_query_pairs(query)))
    ordered = {key: merged[key] for key in sorted(merged)}
    return f"{path}?{build_query(ordered)}"


def get_params_as_dict(url: str) -> dict[str, str]:
    query = urlsplit(url).query
    if not query:
        return {}
    return dict(_query_pairs(query))


def merge_url_params(url_to_steal_from: str, url_to_add_to: str) -> str:
    """Copy params of the first URL into the second; existing ones are untouched."""

    new_params = get_params_as_dict(url_to_steal_from)
    if not new_params:
        return url_to_add_to
    return append_params_to_url(url_to_add_to, new_params)


def force_slash_prefix(value: str | None) -> str:
    if not value:
        return ""
    return value if value.startswith("/") else "/" + value


def base_graph_url_endpoint(url_to_trim: str) -> str:
    """Trim scheme, host and version segment off an absolute Graph URL."""

    trimmed, count = _GRAPH_BASE_URL_RE.subn("", url_to_trim, count=1)
    if count == 0:
        return force_slash_prefix(url_to_trim)
    return "/" + trimmed


__all__ = [
    "remove_params_from_url",
    "append_params_to_url",
    "get_params_as_dict",
    "merge_url_params",
    "force_slash_prefix",
    "base_graph_url_endpoint",
]
