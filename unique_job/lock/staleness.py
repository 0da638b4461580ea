"""
Stale lock detection.

A lock is stale only when it is admitted, running, and no live worker is
running the same signature. Admitted-but-not-running locks are never stale
whatever their age: they belong to a job still waiting in the queue.
"""

import logging

from unique_job.jobs.catalog import JobCatalog
from unique_job.lock.identity import lock_key, run_lock_key
from unique_job.lock.state import LockStateEvaluator
from unique_job.observability.metrics import MetricsCollector, get_metrics
from unique_job.registry.base import WorkerRegistry
from unique_job.types.job import LeaseConfig

logger = logging.getLogger(__name__)


class StalenessResolver:
    """
    Decides whether a held admission lock has been abandoned.
    """

    def __init__(
        self,
        evaluator: LockStateEvaluator,
        registry: WorkerRegistry,
        catalog: JobCatalog,
        metrics: MetricsCollector | None = None,
    ):
        self._evaluator = evaluator
        self._registry = registry
        self._catalog = catalog
        self._metrics = metrics or get_metrics()

    async def find_stale(
        self,
        admission_key: str,
        lease: LeaseConfig,
        job_type: str = "",
    ) -> int | None:
        """
        Check whether the lock at admission_key is stale.

        Args:
            admission_key: The admission lock key.
            lease: Lease of the owning job type.
            job_type: Name of the job type owning the lock. Registry entries
                of this type are always matched, even when it is not in the
                catalog.

        Returns:
            The current admission lock value if stale, to be used as the
            expected value when stealing; otherwise None.
        """
        stale_value = await self._evaluator.resolve(admission_key, lease, job_type)
        if stale_value is None:
            return None

        run_key = run_lock_key(admission_key)
        if await self._evaluator.resolve(run_key, lease, job_type) is None:
            return None

        if await self._is_running_somewhere(run_key, job_type):
            return None

        logger.info(
            "Detected stale lock",
            extra={"lock_key": admission_key, "job_type": job_type, "value": stale_value},
        )
        return stale_value

    async def _is_running_somewhere(self, run_key: str, job_type: str) -> bool:
        for entry in await self._registry.snapshot():
            # The job type being admitted always resolves, registered or not
            if entry.job_type != job_type and entry.job_type not in self._catalog:
                # Unknown job type, ignore
                logger.debug(
                    "Skipping registry entry with unknown job type",
                    extra={"worker_id": entry.worker_id, "job_type": entry.job_type},
                )
                self._metrics.record_registry_skipped("unknown_job_type")
                continue
            if run_lock_key(lock_key(entry.job_type, entry.args)) == run_key:
                return True
        return False
