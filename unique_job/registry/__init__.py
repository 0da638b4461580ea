"""
Worker registry module.
Contains sources of in-flight work snapshots used for stale lock detection.
"""

from unique_job.registry.base import WorkerRegistry
from unique_job.registry.redis_registry import RedisWorkerRegistry
from unique_job.registry.static import StaticWorkerRegistry

__all__ = [
    "WorkerRegistry",
    "StaticWorkerRegistry",
    "RedisWorkerRegistry",
]
