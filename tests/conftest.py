from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from social_graph_client.core.auth import Credentials  # noqa: E402
from social_graph_client.core.request import GraphRequest  # noqa: E402


@pytest.fixture(scope="session")
def fixture_dir() -> Path:
    return ROOT / "tests" / "fixtures"


@pytest.fixture(scope="session")
def fixture_loader(fixture_dir: Path):
    def _load(name: str) -> dict[str, Any]:
        path = fixture_dir / "graph_responses" / name
        return json.loads(path.read_text(encoding="utf-8"))

    return _load


@pytest.fixture(scope="session")
def upload_path(fixture_dir: Path) -> Path:
    return fixture_dir / "foo.txt"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials("123", "foo_secret")


@pytest.fixture
def make_request(credentials: Credentials):
    def _make(
        method: str = "GET",
        endpoint: str = "/foo",
        params: dict[str, object] | None = None,
        *,
        access_token: str | None = "foo_token",
        graph_version: str | None = "v12.0",
    ) -> GraphRequest:
        return GraphRequest(credentials, access_token, method, endpoint, params, None, graph_version)

    return _make
