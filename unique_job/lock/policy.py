"""
Unique job lock policy.

The host queue calls the policy at three points of a job's life:

- ``before_enqueue``: admit the job only if no job with the same signature is
  queued or running, stealing the lock back if its holder died mid-run.
- ``around_perform``: mark the signature as running while the job body runs
  and release both locks however the body exits.
- ``after_dequeue``: release both locks when a queued job is removed.
"""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from unique_job.config import Settings, get_settings
from unique_job.constants import (
    SPAN_AFTER_DEQUEUE,
    SPAN_AROUND_PERFORM,
    SPAN_BEFORE_ENQUEUE,
    AdmissionOutcome,
)
from unique_job.jobs.catalog import JobCatalog
from unique_job.lock.identity import lock_key, run_lock_key
from unique_job.lock.lease import apply_lease
from unique_job.lock.reclaim import AtomicReclaimer, next_lock_value
from unique_job.lock.staleness import StalenessResolver
from unique_job.lock.state import LockStateEvaluator
from unique_job.observability.metrics import MetricsCollector, get_metrics
from unique_job.observability.tracing import get_tracer, set_span_attributes
from unique_job.registry.base import WorkerRegistry
from unique_job.registry.redis_registry import RedisWorkerRegistry
from unique_job.store.base import LockStore
from unique_job.store.redis_store import RedisLockStore
from unique_job.types.job import JobType, LockSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LockPolicy:
    """
    Lifecycle hooks enforcing one queued-or-running instance per signature.

    Implements the LifecycleHooks interface. Job types may be given as
    JobType values or as names registered in the catalog.
    """

    def __init__(
        self,
        store: LockStore,
        registry: WorkerRegistry,
        catalog: JobCatalog,
        clock: Callable[[], float] = time.time,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the policy.

        Args:
            store: The shared lock store.
            registry: Source of in-flight work for stale lock detection.
            catalog: Known job types.
            clock: Returns the current epoch time in seconds.
            metrics: Optional metrics collector.
        """
        self._store = store
        self._catalog = catalog
        self._clock = clock
        self._metrics = metrics or get_metrics()

        self._evaluator = LockStateEvaluator(store, clock=clock, metrics=self._metrics)
        self._resolver = StalenessResolver(
            self._evaluator,
            registry,
            catalog,
            metrics=self._metrics,
        )
        self._reclaimer = AtomicReclaimer(store, metrics=self._metrics)

    def _resolve_job_type(self, job_type: JobType | str) -> JobType:
        if isinstance(job_type, JobType):
            return job_type
        return self._catalog.require(job_type)

    def lock_key(self, job_type: JobType | str, *args: Any) -> str:
        """Get the admission lock key for a job signature."""
        return lock_key(self._resolve_job_type(job_type).name, args)

    def run_lock_key(self, job_type: JobType | str, *args: Any) -> str:
        """Get the run lock key for a job signature."""
        return run_lock_key(self.lock_key(job_type, *args))

    async def before_enqueue(self, job_type: JobType | str, *args: Any) -> bool:
        """
        Try to admit a job.

        Steals the lock if it is stale, otherwise tries a plain set-if-absent.
        The job type's lease is attached to the lock on success.

        Args:
            job_type: The job type.
            *args: The job's arguments.

        Returns:
            True if the job may be enqueued.
        """
        jt = self._resolve_job_type(job_type)
        key = lock_key(jt.name, args)

        with get_tracer().start_as_current_span(SPAN_BEFORE_ENQUEUE) as span:
            set_span_attributes(span, job_type=jt.name, lock_key=key)

            stale_value = await self._resolver.find_stale(key, jt.lease, jt.name)

            got_lock = False
            outcome = AdmissionOutcome.DENIED
            if stale_value is not None:
                got_lock = await self._reclaimer.reclaim(
                    key,
                    run_lock_key(key),
                    stale_value,
                    next_lock_value(stale_value, self._clock()),
                    job_type=jt.name,
                )
                if got_lock:
                    outcome = AdmissionOutcome.STOLEN

            if not got_lock:
                got_lock = await self._store.setnx(
                    key,
                    next_lock_value(stale_value, self._clock()),
                )
                if got_lock:
                    outcome = AdmissionOutcome.ACQUIRED

            if got_lock:
                await apply_lease(self._store, key, jt.lease)

            span.set_attribute("outcome", outcome.value)

        self._metrics.record_admission(jt.name, outcome.value)
        logger.debug(
            "Admission decided",
            extra={"job_type": jt.name, "lock_key": key, "outcome": outcome.value},
        )
        return got_lock

    @asynccontextmanager
    async def running(self, job_type: JobType | str, *args: Any) -> AsyncIterator[str]:
        """
        Hold the run lock for the duration of the block.

        Both locks are released on every exit path, including exceptions and
        cancellation.

        Args:
            job_type: The job type.
            *args: The job's arguments.

        Yields:
            The admission lock key.
        """
        jt = self._resolve_job_type(job_type)
        # Keys are computed before the job runs; the job may mutate its args.
        key = lock_key(jt.name, args)
        run_key = run_lock_key(key)

        started = self._clock()
        await self._store.set(run_key, int(started))

        status = "failed"
        try:
            yield key
            status = "succeeded"
        finally:
            await self._release(jt, key, run_key, reason="performed")
            self._metrics.record_release(
                jt.name,
                "performed",
                held_seconds=max(0.0, self._clock() - started),
                status=status,
            )

    async def around_perform(
        self,
        job_type: JobType | str,
        body: Callable[[], Awaitable[T]],
        *args: Any,
    ) -> T:
        """
        Run a job body under the run lock.

        Args:
            job_type: The job type.
            body: Zero-argument coroutine function performing the job.
            *args: The job's arguments.

        Returns:
            Whatever body returns; exceptions from body propagate after the
            locks are released.
        """
        jt = self._resolve_job_type(job_type)
        with get_tracer().start_as_current_span(SPAN_AROUND_PERFORM) as span:
            set_span_attributes(span, job_type=jt.name)
            async with self.running(jt, *args) as key:
                span.set_attribute("lock_key", key)
                return await body()

    async def after_dequeue(self, job_type: JobType | str, *args: Any) -> None:
        """
        Release both locks of a job removed from the queue.

        Args:
            job_type: The job type.
            *args: The job's arguments.
        """
        jt = self._resolve_job_type(job_type)
        key = lock_key(jt.name, args)

        with get_tracer().start_as_current_span(SPAN_AFTER_DEQUEUE) as span:
            set_span_attributes(span, job_type=jt.name, lock_key=key)
            await self._release(jt, key, run_lock_key(key), reason="dequeued")

        self._metrics.record_release(jt.name, "dequeued")

    async def inspect(self, job_type: JobType | str, *args: Any) -> LockSnapshot:
        """
        Get the current lock state of a job signature.

        Reading applies the lease, so expired locks are deleted as a side
        effect, exactly as during admission.
        """
        jt = self._resolve_job_type(job_type)
        key = lock_key(jt.name, args)
        run_key = run_lock_key(key)
        return LockSnapshot(
            lock_key=key,
            run_lock_key=run_key,
            admitted_at=await self._evaluator.resolve(key, jt.lease, jt.name),
            started_at=await self._evaluator.resolve(run_key, jt.lease, jt.name),
        )

    async def _release(
        self,
        job_type: JobType,
        key: str,
        run_key: str,
        reason: str,
    ) -> None:
        try:
            await self._store.delete(run_key)
            await self._store.delete(key)
        except Exception:
            logger.exception(
                "Failed to release job locks",
                extra={"job_type": job_type.name, "lock_key": key, "reason": reason},
            )
            raise
        logger.debug(
            "Released job locks",
            extra={"job_type": job_type.name, "lock_key": key, "reason": reason},
        )


def create_policy(
    store: RedisLockStore,
    catalog: JobCatalog,
    settings: Settings | None = None,
) -> LockPolicy:
    """
    Create a policy reading in-flight work from the host queue's Redis keys.

    Args:
        store: The Redis lock store, shared with the worker registry.
        catalog: Known job types.
        settings: Optional settings override. Uses cached settings if not provided.

    Returns:
        LockPolicy: The configured policy.
    """
    settings = settings or get_settings()
    registry = RedisWorkerRegistry(
        store.client,
        namespace=settings.worker_registry_namespace,
    )
    return LockPolicy(store=store, registry=registry, catalog=catalog)
