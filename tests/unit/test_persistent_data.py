from __future__ import annotations

import pytest

from social_graph_client.core.errors import GraphConfigurationError
from social_graph_client.core.persistent_data import (
    MemoryPersistentDataHandler,
    resolve_persistent_data_handler,
)


class CustomHandler:
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


def test_memory_handler_get_and_set():
    handler = MemoryPersistentDataHandler()
    assert handler.get("state") is None
    handler.set("state", "abc")
    assert handler.get("state") == "abc"


@pytest.mark.parametrize("value", [None, "memory"], ids=["none", "memory"])
def test_resolve_builds_memory_handler(value):
    assert isinstance(resolve_persistent_data_handler(value), MemoryPersistentDataHandler)


def test_resolve_keeps_custom_handler():
    handler = CustomHandler()
    assert resolve_persistent_data_handler(handler) is handler


@pytest.mark.parametrize("value", ["session", "redis", {"a": 1}, 42], ids=["session", "unknown", "dict", "int"])
def test_resolve_rejects_anything_else(value):
    with pytest.raises(GraphConfigurationError):
        resolve_persistent_data_handler(value)
