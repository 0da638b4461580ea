"""
Store module.
Contains the key-value store interface and its Redis implementation.
"""

from unique_job.store.base import LockStore
from unique_job.store.connection import create_store, store_context
from unique_job.store.redis_store import RedisLockStore

__all__ = [
    "LockStore",
    "RedisLockStore",
    "create_store",
    "store_context",
]
