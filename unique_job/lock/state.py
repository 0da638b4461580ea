"""
Lock state evaluation with lazy lease expiry.
"""

import logging
import time
from collections.abc import Callable

from unique_job.observability.metrics import MetricsCollector, get_metrics
from unique_job.store.base import LockStore
from unique_job.types.job import LeaseConfig

logger = logging.getLogger(__name__)

# Delete the lock if its timestamp is older than the cutoff, in one step so
# the value cannot change between the read and the delete.
EXPIRE_IF_OLDER_SCRIPT = """
local set_time = tonumber(redis.call('GET', KEYS[1]))
if set_time and set_time < tonumber(ARGV[1]) then
  redis.call('DEL', KEYS[1])
  return -1
end
if set_time then
  return set_time
end
return false
"""

# Script reply meaning "was present but expired and is now deleted"
_EXPIRED = -1


def _to_timestamp(key: str, raw: str | int | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(
            "Ignoring non-numeric lock value",
            extra={"lock_key": key, "value": raw},
        )
        return None


class LockStateEvaluator:
    """
    Resolves a lock's stored timestamp against its lease.

    Reading an expired lock deletes it: an expired lease is the same as a
    lock that was never acquired, and nothing else cleans it up.
    """

    def __init__(
        self,
        store: LockStore,
        clock: Callable[[], float] = time.time,
        metrics: MetricsCollector | None = None,
    ):
        self._store = store
        self._clock = clock
        self._metrics = metrics or get_metrics()

    async def resolve(
        self,
        key: str,
        lease: LeaseConfig,
        job_type: str = "",
    ) -> int | None:
        """
        Get the live timestamp stored at key.

        Args:
            key: Lock key.
            lease: Lease of the owning job type.
            job_type: Job type name, for metrics and logs.

        Returns:
            The stored timestamp, or None if absent or expired.
        """
        if not lease.enabled:
            return _to_timestamp(key, await self._store.get(key))

        cutoff = lease.cutoff(self._clock())
        result = await self._store.eval_atomic(
            EXPIRE_IF_OLDER_SCRIPT,
            keys=[key],
            args=[cutoff],
        )
        if result is None:
            return None
        result = int(result)
        if result == _EXPIRED:
            logger.info(
                "Expired lock deleted on read",
                extra={"lock_key": key, "job_type": job_type, "cutoff": cutoff},
            )
            self._metrics.record_expired(job_type)
            return None
        return result
