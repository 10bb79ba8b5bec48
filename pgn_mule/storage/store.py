"""
Redis key-value store connection management.

Uses redis.asyncio for async get/set/delete by key and SCAN-based prefix
listing. Every key is namespaced so several relays can share one Redis
database.
"""

import logging
from types import TracebackType

import redis.asyncio as redis

from pgn_mule.config.settings import get_settings

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Async Redis key-value store.

    Only single-key operations are exposed; callers rely on Redis'
    per-key atomicity and never on multi-key transactions.

    Usage:
        store = KeyValueStore()
        await store.connect()

        await store.set("source:wch", payload)
        keys = await store.keys("source:")

        await store.close()
    """

    def __init__(
        self,
        redis_url: str | None = None,
        namespace: str | None = None,
        client: redis.Redis | None = None,
    ):
        """
        Initialize the store.

        Args:
            redis_url: Redis connection URL
            namespace: Prefix prepended to every key
            client: Pre-built client (skips connect())
        """
        settings = get_settings()

        self._redis_url = redis_url or str(settings.redis_url)
        self._namespace = settings.key_namespace if namespace is None else namespace
        self._redis: redis.Redis | None = client

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def _strip(self, full_key: str) -> str:
        if self._namespace and full_key.startswith(f"{self._namespace}:"):
            return full_key[len(self._namespace) + 1:]
        return full_key

    async def connect(self) -> None:
        """Establish the Redis connection."""
        if self._redis is not None:
            return
        try:
            self._redis = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self._redis.ping()
            logger.info(f"Connected to Redis (namespace={self._namespace!r})")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis connection closed")

    async def __aenter__(self) -> "KeyValueStore":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client, raising if not connected."""
        if self._redis is None:
            raise RuntimeError("Store not connected. Call connect() first.")
        return self._redis

    async def get(self, key: str) -> str | None:
        """Return the value stored at key, or None."""
        return await self.client.get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        """Store value at key, overwriting any previous value."""
        await self.client.set(self._key(key), value)

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True if something was removed."""
        return bool(await self.client.delete(self._key(key)))

    async def keys(self, prefix: str) -> list[str]:
        """
        List keys starting with prefix.

        Returns the keys without the namespace, in Redis' scan order.
        """
        pattern = self._key(prefix) + "*"
        return [self._strip(k) async for k in self.client.scan_iter(match=pattern)]

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return False
