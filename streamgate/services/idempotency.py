"""
Redis-backed idempotency keys for self-service claims.

A key moves through reserve() -> complete(record_id) on success, or
reserve() -> release() when the write fails, so a retry after a storage
error starts over instead of being collapsed into an unrelated record.
Every redis failure fails open: a duplicate claim is harmless, a lost one is not.
"""
import logging

import redis

from streamgate.core.config import settings

logger = logging.getLogger(__name__)

# Value held by a reserved key until the owning request commits.
IN_FLIGHT = "__in_flight__"


class IdempotencyStore:
    def __init__(self, client: redis.Redis | None = None) -> None:
        self.client = client or redis.Redis.from_url(settings.redis_url, decode_responses=True)
        self.default_ttl = settings.idempotency_ttl

    @staticmethod
    def _key(key: str) -> str:
        return f"idempotency:{key}"

    def reserve(self, key: str, ttl_seconds: int | None = None) -> bool:
        """SET NX EX in one call. True if this caller owns the key (or redis is down)."""
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        try:
            created = self.client.set(self._key(key), IN_FLIGHT, nx=True, ex=ttl)
        except redis.RedisError as e:
            logger.warning("idempotency_redis_error", extra={"action": "reserve", "error": str(e)})
            return True
        return created is not None

    def lookup(self, key: str) -> str | None:
        """IN_FLIGHT, the stored result, or None (expired, never set, redis down)."""
        try:
            return self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning("idempotency_redis_error", extra={"action": "lookup", "error": str(e)})
            return None

    def complete(self, key: str, result: str, ttl_seconds: int | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        try:
            self.client.set(self._key(key), result, ex=ttl)
        except redis.RedisError as e:
            logger.warning("idempotency_redis_error", extra={"action": "complete", "error": str(e)})

    def release(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            logger.warning("idempotency_redis_error", extra={"action": "release", "error": str(e)})

    def ping(self) -> bool:
        return bool(self.client.ping())
