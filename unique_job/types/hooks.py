"""
Lifecycle hook interfaces consumed by the host queue.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from unique_job.types.job import JobType

T = TypeVar("T")


@runtime_checkable
class LifecycleHooks(Protocol):
    """
    The three lifecycle entry points a host queue calls for a job.

    Each receives the job type and the same positional arguments the job
    itself receives.
    """

    async def before_enqueue(self, job_type: JobType | str, *args: Any) -> bool:
        """Called before a job is enqueued; False vetoes the enqueue."""
        ...

    async def around_perform(
        self,
        job_type: JobType | str,
        body: Callable[[], Awaitable[T]],
        *args: Any,
    ) -> T:
        """Called around job execution; must await body exactly once."""
        ...

    async def after_dequeue(self, job_type: JobType | str, *args: Any) -> None:
        """Called after a queued job is removed without running."""
        ...
