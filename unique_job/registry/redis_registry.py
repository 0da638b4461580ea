"""
Worker registry read from a Resque-compatible Redis layout.

Layout:
- ``{namespace}:workers`` is a set of worker ids.
- ``{namespace}:worker:{id}`` holds a JSON document describing the job the
  worker is running; the key is absent while the worker is idle.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import redis.asyncio as redis
from pydantic import ValidationError

from unique_job.constants import DEFAULT_REGISTRY_NAMESPACE
from unique_job.observability.metrics import MetricsCollector, get_metrics
from unique_job.types.registry import (
    ResquePayload,
    ResqueWorkerJob,
    WorkerRegistryEntry,
)

logger = logging.getLogger(__name__)


class RedisWorkerRegistry:
    """
    Worker registry backed by the host queue's Redis worker keys.

    Entries that cannot be parsed are skipped: missing a steal is safer than
    stealing a lock that a live worker holds.
    """

    def __init__(
        self,
        client: redis.Redis,
        namespace: str = DEFAULT_REGISTRY_NAMESPACE,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the registry.

        Args:
            client: An async Redis client created with decode_responses=True.
            namespace: Key namespace of the host queue.
            metrics: Optional metrics collector.
        """
        self._client = client
        self._namespace = namespace
        self._metrics = metrics or get_metrics()

    @property
    def workers_key(self) -> str:
        return f"{self._namespace}:workers"

    def worker_key(self, worker_id: str) -> str:
        return f"{self._namespace}:worker:{worker_id}"

    async def snapshot(self) -> list[WorkerRegistryEntry]:
        """
        Get the jobs currently being worked on.

        Returns:
            One entry per busy worker with a parseable job document.
        """
        worker_ids = sorted(await self._client.smembers(self.workers_key))
        if not worker_ids:
            return []

        documents = await self._client.mget([self.worker_key(w) for w in worker_ids])

        entries: list[WorkerRegistryEntry] = []
        for worker_id, document in zip(worker_ids, documents):
            if document is None:
                continue
            entry = self._parse(worker_id, document)
            if entry is not None:
                entries.append(entry)
        return entries

    def _parse(self, worker_id: str, document: str) -> WorkerRegistryEntry | None:
        try:
            job = ResqueWorkerJob.model_validate_json(document)
        except ValidationError as e:
            logger.warning(
                "Skipping unreadable worker registry entry",
                extra={"worker_id": worker_id, "error": str(e)},
            )
            self._metrics.record_registry_skipped("malformed")
            return None

        return WorkerRegistryEntry(
            worker_id=worker_id,
            job_type=job.payload.class_name,
            args=job.payload.args,
            queue=job.queue,
        )

    async def register_working(
        self,
        worker_id: str,
        job_type: str,
        args: list[Any],
        queue: str | None = None,
    ) -> None:
        """
        Record that a worker started a job, in the host queue's layout.

        Args:
            worker_id: The worker identifier.
            job_type: Job type name.
            args: Job arguments.
            queue: Queue the job was taken from.
        """
        job = ResqueWorkerJob(
            queue=queue,
            run_at=datetime.now(timezone.utc).isoformat(),
            payload=ResquePayload(class_name=job_type, args=list(args)),
        )
        document = job.model_dump_json(by_alias=True)
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.sadd(self.workers_key, worker_id)
            pipe.set(self.worker_key(worker_id), document)
            await pipe.execute()

    async def unregister_working(self, worker_id: str) -> None:
        """Record that a worker finished its job and left the registry."""
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.srem(self.workers_key, worker_id)
            pipe.delete(self.worker_key(worker_id))
            await pipe.execute()
