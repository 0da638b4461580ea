"""
Type definitions for unique job locks.
Contains job type descriptors, worker registry entries and lifecycle hook
interfaces, grouped by module.
"""

from unique_job.types.hooks import LifecycleHooks
from unique_job.types.job import (
    JobType,
    LeaseConfig,
    LockSnapshot,
)
from unique_job.types.registry import (
    ResquePayload,
    ResqueWorkerJob,
    WorkerRegistryEntry,
)

__all__ = [
    # Job types
    "JobType",
    "LeaseConfig",
    "LockSnapshot",
    # Registry types
    "WorkerRegistryEntry",
    "ResquePayload",
    "ResqueWorkerJob",
    # Hook interfaces
    "LifecycleHooks",
]
