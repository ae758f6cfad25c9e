"""App credentials and access tokens."""

from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass
from datetime import datetime, timezone

_LONG_LIVED_THRESHOLD_SECONDS = 60 * 60 * 2


def app_secret_proof(secret: str, access_token: str) -> str:
    """HMAC-SHA256 hex digest of the token, keyed by the app secret."""

    return hmac.new(
        secret.encode("utf-8"),
        access_token.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


@dataclass(slots=True, frozen=True)
class AccessToken:
    value: str
    expires_at: datetime | int | float | None = None

    def __post_init__(self) -> None:
        if self.expires_at is None or isinstance(self.expires_at, datetime):
            return
        object.__setattr__(
            self,
            "expires_at",
            datetime.fromtimestamp(self.expires_at, tz=timezone.utc),
        )

    def app_secret_proof(self, secret: str) -> str:
        return app_secret_proof(secret, self.value)

    def is_app_access_token(self) -> bool:
        return "|" in self.value

    def is_long_lived(self, *, now: float | None = None) -> bool:
        current = time.time() if now is None else now
        expires_at = self._expires_timestamp()
        if expires_at is not None:
            return expires_at > current + _LONG_LIVED_THRESHOLD_SECONDS
        return self.is_app_access_token()

    def is_expired(self, *, now: float | None = None) -> bool | None:
        """Tri-state: ``None`` when the expiry cannot be determined."""

        current = time.time() if now is None else now
        expires_at = self._expires_timestamp()
        if expires_at is not None:
            return expires_at < current
        if self.is_app_access_token():
            return False
        return None

    def _expires_timestamp(self) -> float | None:
        if isinstance(self.expires_at, datetime):
            return self.expires_at.timestamp()
        return None

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class Credentials:
    """App id/secret pair used to sign requests."""

    app_id: str
    secret: str

    def access_token(self) -> AccessToken:
        return AccessToken(f"{self.app_id}|{self.secret}")


__all__ = [
    "AccessToken",
    "Credentials",
    "app_secret_proof",
]
