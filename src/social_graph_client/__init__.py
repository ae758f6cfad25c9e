"""Public package exports for the social graph API client."""

from .async_client import AsyncGraphClient
from .client import GraphClient
from .config import GraphClientConfig

__all__ = ["GraphClient", "AsyncGraphClient", "GraphClientConfig"]
