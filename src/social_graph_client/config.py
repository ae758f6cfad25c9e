"""Client configuration."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

SDK_VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"social-graph-client/{SDK_VERSION}"
DEFAULT_GRAPH_VERSION = "v12.0"

_GRAPH_VERSION_RE = re.compile(r"^v\d+\.\d+$")
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Transport-related settings."""

    timeout_seconds: float = 60.0
    video_upload_timeout_seconds: float = 3600.0
    connect_timeout_seconds: float = 10.0

    def validate(self) -> None:
        for field_name in (
            "timeout_seconds",
            "video_upload_timeout_seconds",
            "connect_timeout_seconds",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"transport.{field_name} must be > 0")


@dataclass(slots=True, frozen=True)
class GraphClientConfig:
    """Runtime configuration for the Graph client."""

    app_id: str = ""
    app_secret: str = ""
    default_graph_version: str = DEFAULT_GRAPH_VERSION
    default_access_token: str | None = None
    enable_beta_mode: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    persistent_data_handler: str = "memory"

    transport: TransportConfig = field(default_factory=TransportConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GraphClientConfig":
        """Build a config from ``GRAPH_*`` environment variables."""

        env = os.environ if environ is None else environ
        return cls(
            app_id=env.get("GRAPH_APP_ID", ""),
            app_secret=env.get("GRAPH_APP_SECRET", ""),
            default_graph_version=env.get("GRAPH_API_VERSION") or DEFAULT_GRAPH_VERSION,
            default_access_token=env.get("GRAPH_ACCESS_TOKEN") or None,
            enable_beta_mode=env.get("GRAPH_BETA_MODE", "").strip().lower() in _TRUE_VALUES,
        )

    def validate(self) -> None:
        if not self.app_id:
            raise ValueError("app_id must not be empty")
        if not self.app_secret:
            raise ValueError("app_secret must not be empty")
        if not _GRAPH_VERSION_RE.match(self.default_graph_version):
            raise ValueError(
                f"default_graph_version must look like v<major>.<minor>: {self.default_graph_version!r}"
            )
        if not isinstance(self.enable_beta_mode, bool):
            raise ValueError("enable_beta_mode must be bool")
        if not self.user_agent:
            raise ValueError("user_agent must not be empty")
        self.transport.validate()


__all__ = [
    "SDK_VERSION",
    "DEFAULT_USER_AGENT",
    "DEFAULT_GRAPH_VERSION",
    "TransportConfig",
    "GraphClientConfig",
]
