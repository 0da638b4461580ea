"""
Worker registry interface.
"""

from typing import Protocol

from unique_job.types.registry import WorkerRegistryEntry


class WorkerRegistry(Protocol):
    """
    Read-only source of the work currently in flight across all workers.
    """

    async def snapshot(self) -> list[WorkerRegistryEntry]:
        """Get a point-in-time list of in-flight items."""
        ...
