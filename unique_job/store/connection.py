"""
Lock store connection management.
Creates store clients whose lifecycle is owned by the host process.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from unique_job.config import Settings, get_settings
from unique_job.store.redis_store import RedisLockStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings | None = None) -> RedisLockStore:
    """
    Create a Redis lock store from configuration.
    Should be called on host process startup; close it on shutdown.

    Args:
        settings: Optional settings override. Uses cached settings if not provided.

    Returns:
        RedisLockStore: The lock store.
    """
    settings = settings or get_settings()
    store = RedisLockStore.from_url(
        settings.redis_url,
        socket_timeout=settings.redis_socket_timeout_seconds,
    )
    logger.info("Lock store connection initialized")
    return store


@asynccontextmanager
async def store_context(settings: Settings | None = None) -> AsyncGenerator[RedisLockStore]:
    """
    Context manager owning a lock store for its duration.
    Useful for workers and scripts that run outside a long-lived host.

    Yields:
        RedisLockStore: The lock store.
    """
    store = create_store(settings)
    try:
        yield store
    finally:
        await store.close()
