"""
Lease handling for admission locks.
"""

import logging

from unique_job.store.base import LockStore
from unique_job.types.job import LeaseConfig

logger = logging.getLogger(__name__)


async def apply_lease(store: LockStore, key: str, lease: LeaseConfig) -> bool:
    """
    Attach the lease TTL to a freshly acquired admission lock.

    Run locks never get a lease; they are always removed explicitly when
    execution ends.

    Args:
        store: The lock store.
        key: The admission lock key.
        lease: The job type's lease configuration.

    Returns:
        True if an expiry was set.
    """
    if not lease.enabled:
        return False
    applied = await store.expire(key, lease.ttl_seconds)
    logger.debug(
        "Applied lease to lock",
        extra={"lock_key": key, "ttl_seconds": lease.ttl_seconds, "applied": applied},
    )
    return applied
