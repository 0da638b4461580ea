"""
Redis implementation of the lock store.
"""

import logging
from collections.abc import Sequence
from typing import Any

import redis.asyncio as redis
from redis.commands.core import AsyncScript

logger = logging.getLogger(__name__)


class RedisLockStore:
    """
    Lock store backed by a redis.asyncio client.

    Scripts are registered once per script text and run through EVALSHA,
    falling back to EVAL when the server has not cached them yet.
    """

    def __init__(self, client: redis.Redis):
        """
        Initialize the store with a Redis client.

        Args:
            client: An async Redis client created with decode_responses=True.
        """
        self._client: redis.Redis | None = client
        self._scripts: dict[str, AsyncScript] = {}

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = None) -> "RedisLockStore":
        """
        Create a store connected to the given Redis URL.

        Args:
            url: Redis connection URL.
            socket_timeout: Optional socket timeout in seconds.

        Returns:
            RedisLockStore: The store instance.
        """
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
        )
        return cls(client)

    @property
    def client(self) -> redis.Redis:
        """Get the underlying Redis client."""
        if self._client is None:
            raise RuntimeError("Lock store is closed")
        return self._client

    async def get(self, key: str) -> str | None:
        return await self.client.get(key)

    async def set(self, key: str, value: Any) -> None:
        await self.client.set(key, value)

    async def setnx(self, key: str, value: Any) -> bool:
        return bool(await self.client.setnx(key, value))

    async def delete(self, key: str) -> int:
        return await self.client.delete(key)

    async def expire(self, key: str, seconds: int) -> bool:
        return bool(await self.client.expire(key, seconds))

    async def eval_atomic(
        self,
        script: str,
        keys: Sequence[str],
        args: Sequence[Any],
    ) -> Any:
        """
        Run a Lua script atomically on the server.

        Args:
            script: Lua source.
            keys: Keys the script touches (KEYS table).
            args: Script arguments (ARGV table).

        Returns:
            The script's return value as decoded by the client.
        """
        registered = self._scripts.get(script)
        if registered is None:
            registered = self.client.register_script(script)
            self._scripts[script] = registered
        return await registered(keys=list(keys), args=list(args))

    async def close(self) -> None:
        """Close the underlying connection pool."""
        if self._client is None:
            return
        client = self._client
        self._client = None
        self._scripts.clear()
        await client.aclose()
        logger.info("Lock store connection closed")
