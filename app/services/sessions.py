"""
Server-side login sessions keyed by an opaque cookie token.
"""
from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Optional

import structlog

from app.services.cache import CacheService

logger = structlog.get_logger()

KEY_PREFIX = "session:"


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str

    def to_public(self) -> dict:
        return {"_id": self.user_id, "username": self.username}


class SessionStore:
    def __init__(self, cache: CacheService, idle_seconds: int, absolute_seconds: int) -> None:
        if idle_seconds <= 0 or absolute_seconds <= 0:
            raise ValueError("session lifetimes must be positive")
        self.cache = cache
        self.idle_seconds = idle_seconds
        self.absolute_seconds = absolute_seconds

    def _ttl(self, expires_at: float) -> int:
        return max(1, int(min(self.idle_seconds, expires_at - time.time())))

    def create(self, identity: Identity) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = time.time() + self.absolute_seconds
        payload = {"user_id": identity.user_id, "username": identity.username, "expires_at": expires_at}
        if not self.cache.set(KEY_PREFIX + token, payload, expire=self._ttl(expires_at)):
            raise RuntimeError("session could not be stored")
        logger.info("session_created", user_id=identity.user_id)
        return token

    def get(self, token: Optional[str]) -> Optional[Identity]:
        """Return the identity bound to ``token``, or None when absent or expired."""
        if not token:
            return None
        key = KEY_PREFIX + token
        payload = self.cache.get(key)
        if not payload:
            return None
        expires_at = float(payload.get("expires_at", 0))
        if time.time() >= expires_at:
            self.cache.delete(key)
            logger.info("session_expired", user_id=payload.get("user_id"))
            return None
        # Idle expiry slides; the absolute deadline does not.
        self.cache.touch(key, self._ttl(expires_at))
        return Identity(user_id=int(payload["user_id"]), username=str(payload["username"]))

    def destroy(self, token: Optional[str]) -> None:
        if token and self.cache.delete(KEY_PREFIX + token):
            logger.info("session_destroyed")
