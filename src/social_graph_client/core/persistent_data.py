"""Key/value persistence used for CSRF state and similar session data."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from .errors import GraphConfigurationError


@runtime_checkable
class PersistentDataHandler(Protocol):
    """Persistence contract: string keys, arbitrary values."""

    def get(self, key: str) -> object | None:
        """Return the stored value, or ``None`` when absent."""

    def set(self, key: str, value: object) -> None:
        """Store a value under ``key``."""


class MemoryPersistentDataHandler:
    """Process-local store; lost when the handler is dropped."""

    def __init__(self) -> None:
        self._data: dict[str, object] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> object | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: object) -> None:
        with self._lock:
            self._data[key] = value


def resolve_persistent_data_handler(
    handler: PersistentDataHandler | str | None,
) -> PersistentDataHandler:
    if handler is None or handler == "memory":
        return MemoryPersistentDataHandler()
    if not isinstance(handler, str) and isinstance(handler, PersistentDataHandler):
        return handler
    raise GraphConfigurationError(
        'The persistent data handler must be set to "memory", '
        "or be an object with get(key) and set(key, value)."
    )


__all__ = [
    "PersistentDataHandler",
    "MemoryPersistentDataHandler",
    "resolve_persistent_data_handler",
]
