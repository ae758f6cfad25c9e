from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from social_graph_client.config import GraphClientConfig
from social_graph_client.core.transport_shared import RawResponse, RequestBody


@dataclass
class SentRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: RequestBody
    timeout: float


Step = RawResponse | Exception


def json_response(payload: object, status_code: int = 200, headers: Mapping[str, str] | None = None) -> RawResponse:
    return RawResponse(status_code=status_code, headers=dict(headers or {}), body=json.dumps(payload))


class SyncSequencedTransport:
    def __init__(self, steps: Sequence[Step]):
        self.steps = list(steps)
        self.sent: list[SentRequest] = []
        self.closed = False

    def send(self, method, url, *, headers, body, timeout) -> RawResponse:
        self.sent.append(SentRequest(method, url, dict(headers), body, timeout))
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def close(self):
        self.closed = True


class AsyncSequencedTransport:
    def __init__(self, steps: Sequence[Step]):
        self.steps = list(steps)
        self.sent: list[SentRequest] = []
        self.closed = False

    async def send(self, method, url, *, headers, body, timeout) -> RawResponse:
        self.sent.append(SentRequest(method, url, dict(headers), body, timeout))
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    async def close(self):
        self.closed = True


def build_config(**overrides) -> GraphClientConfig:
    values = {
        "app_id": "123",
        "app_secret": "foo_secret",
        "default_graph_version": "v12.0",
        "default_access_token": "foo_token",
    }
    values.update(overrides)
    cfg = GraphClientConfig(**values)
    cfg.validate()
    return cfg
