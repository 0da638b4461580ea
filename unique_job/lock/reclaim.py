"""
Atomic theft of stale locks.
"""

import logging

from unique_job.constants import SPAN_RECLAIM
from unique_job.observability.metrics import MetricsCollector, get_metrics
from unique_job.observability.tracing import get_tracer, set_span_attributes
from unique_job.store.base import LockStore

logger = logging.getLogger(__name__)

# Only steal the lock if it still holds the stale value we detected; any other
# value means another process already took it. The check and both writes run
# as one step so exactly one contender can win.
STEAL_IF_UNCHANGED_SCRIPT = """
local current_value = redis.call('GET', KEYS[1])
if tonumber(current_value) == tonumber(ARGV[2]) then
  redis.call('DEL', KEYS[2])
  redis.call('SET', KEYS[1], ARGV[1])
  return 1
end
return 0
"""


def next_lock_value(old_value: int | None, now: float) -> int:
    """
    Get a fresh lock timestamp guaranteed to differ from old_value.

    Args:
        old_value: The value being replaced, if any.
        now: Current epoch time in seconds.

    Returns:
        Epoch seconds for the new lock value.
    """
    value = int(now)
    if value == old_value:
        return value + 1
    return value


class AtomicReclaimer:
    """
    Compare-and-swap on an admission/run lock pair.
    """

    def __init__(self, store: LockStore, metrics: MetricsCollector | None = None):
        self._store = store
        self._metrics = metrics or get_metrics()

    async def reclaim(
        self,
        admission_key: str,
        run_key: str,
        stale_value: int,
        new_value: int,
        job_type: str = "",
    ) -> bool:
        """
        Steal a stale lock if nobody changed it since it was found stale.

        Args:
            admission_key: The admission lock key.
            run_key: The paired run lock key.
            stale_value: Admission lock value observed when detecting staleness.
            new_value: Value to store on success.
            job_type: Job type name, for metrics and logs.

        Returns:
            True if this caller now holds the lock.
        """
        with get_tracer().start_as_current_span(SPAN_RECLAIM) as span:
            set_span_attributes(span, job_type=job_type, lock_key=admission_key)

            result = await self._store.eval_atomic(
                STEAL_IF_UNCHANGED_SCRIPT,
                keys=[admission_key, run_key],
                args=[new_value, stale_value],
            )
            won = int(result or 0) == 1
            span.set_attribute("won", won)

        self._metrics.record_steal_attempt(job_type, won)
        if won:
            logger.info(
                "Stole stale lock",
                extra={"lock_key": admission_key, "stale_value": stale_value, "new_value": new_value},
            )
        else:
            logger.info(
                "Stale lock already taken by another process",
                extra={"lock_key": admission_key, "stale_value": stale_value},
            )
        return won
