"""
Redis-backed key/value cache with an in-process fallback
"""
import json
import threading
import time
from typing import Any, Dict, Optional, Tuple

import redis
import structlog

logger = structlog.get_logger()


class CacheService:
    def __init__(self, redis_url: Optional[str] = "redis://localhost:6379/0"):
        self.redis_client = None
        self._memory_cache: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()
        if not redis_url:
            logger.info("cache_backend_selected", backend="memory")
            return
        try:
            client = redis.from_url(redis_url, decode_responses=True, socket_connect_timeout=1)
            # Test connection
            client.ping()
            self.redis_client = client
            logger.info("cache_backend_selected", backend="redis")
        except redis.RedisError as e:
            logger.warning("redis_unavailable_using_memory_cache", error=str(e))

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client is not None else "memory"

    def _sweep_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [k for k, (_, expires_at) in self._memory_cache.items() if expires_at is not None and now >= expires_at]
        for k in expired:
            del self._memory_cache[k]

    def _memory_get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._memory_cache.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and time.time() >= expires_at:
                del self._memory_cache[key]
                return None
            return value

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        try:
            if self.redis_client:
                value = self.redis_client.get(key)
                return json.loads(value) if value else None
            return self._memory_get(key)
        except redis.RedisError as e:
            logger.error("cache_get_failed", key=key, error=str(e))
            return None

    def set(self, key: str, value: Any, expire: int = 3600) -> bool:
        """Set value in cache with expiration in seconds"""
        try:
            if self.redis_client:
                return bool(self.redis_client.setex(key, expire, json.dumps(value)))
            with self._lock:
                now = time.time()
                self._sweep_expired(now)
                self._memory_cache[key] = (value, now + expire)
            return True
        except redis.RedisError as e:
            logger.error("cache_set_failed", key=key, error=str(e))
            return False

    def touch(self, key: str, expire: int) -> bool:
        """Push the expiry of an existing key out to ``expire`` seconds from now"""
        try:
            if self.redis_client:
                return bool(self.redis_client.expire(key, expire))
            with self._lock:
                entry = self._memory_cache.get(key)
                if entry is None:
                    return False
                self._memory_cache[key] = (entry[0], time.time() + expire)
            return True
        except redis.RedisError as e:
            logger.error("cache_touch_failed", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        """Delete value from cache"""
        try:
            if self.redis_client:
                return bool(self.redis_client.delete(key))
            with self._lock:
                return self._memory_cache.pop(key, None) is not None
        except redis.RedisError as e:
            logger.error("cache_delete_failed", key=key, error=str(e))
            return False

    def close(self) -> None:
        if self.redis_client:
            self.redis_client.close()
        with self._lock:
            self._memory_cache.clear()
