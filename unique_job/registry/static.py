"""
In-memory worker registry for hosts that track in-flight work themselves.
"""

from typing import Any

from unique_job.types.registry import WorkerRegistryEntry


class StaticWorkerRegistry:
    """
    Worker registry backed by a local list of entries.
    """

    def __init__(self, entries: list[WorkerRegistryEntry] | None = None):
        self._entries: dict[str, WorkerRegistryEntry] = {
            entry.worker_id: entry for entry in entries or []
        }

    def add(
        self,
        worker_id: str,
        job_type: str,
        args: list[Any] | None = None,
        queue: str | None = None,
    ) -> WorkerRegistryEntry:
        """Record that a worker is running a job; replaces its previous entry."""
        entry = WorkerRegistryEntry(
            worker_id=worker_id,
            job_type=job_type,
            args=list(args or []),
            queue=queue,
        )
        self._entries[worker_id] = entry
        return entry

    def remove(self, worker_id: str) -> None:
        """Record that a worker is idle."""
        self._entries.pop(worker_id, None)

    def clear(self) -> None:
        self._entries.clear()

    async def snapshot(self) -> list[WorkerRegistryEntry]:
        return list(self._entries.values())
