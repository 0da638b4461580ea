"""
Job type catalog.

Maps job type names to their descriptors. Worker registry entries are
resolved through the catalog; names it does not know are never matched.
"""

import logging

from unique_job.config import Settings, get_settings
from unique_job.types.job import JobType, LeaseConfig

logger = logging.getLogger(__name__)

_UNSET = object()


class JobCatalog:
    """
    Registry of job types known to this process.
    """

    def __init__(self, default_ttl_seconds: int | None = None):
        """
        Initialize an empty catalog.

        Args:
            default_ttl_seconds: Lease TTL for job types registered without one.
        """
        self._default_lease = LeaseConfig.from_value(default_ttl_seconds)
        self._job_types: dict[str, JobType] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "JobCatalog":
        """Create a catalog using the configured default lease."""
        settings = settings or get_settings()
        return cls(default_ttl_seconds=settings.lock_default_ttl_seconds)

    def register(self, name: str, ttl_seconds: int | bool | None | object = _UNSET) -> JobType:
        """
        Register a job type.

        Args:
            name: The job type name used in lock keys.
            ttl_seconds: Lease TTL in seconds; None or False disables expiry.
                Falls back to the catalog default when omitted.

        Returns:
            The registered JobType.
        """
        if ttl_seconds is _UNSET:
            lease = self._default_lease
        else:
            lease = LeaseConfig.from_value(ttl_seconds)

        job_type = JobType(name=name, lease=lease)
        if name in self._job_types:
            logger.warning(f"Replacing registered job type: {name}")
        self._job_types[name] = job_type
        logger.info(
            f"Registered job type: {name}",
            extra={"ttl_seconds": job_type.ttl},
        )
        return job_type

    def get(self, name: str) -> JobType | None:
        """
        Get a job type by name.

        Returns:
            The JobType or None if not registered.
        """
        return self._job_types.get(name)

    def require(self, name: str) -> JobType:
        """
        Get a job type by name, raising if it is not registered.

        Raises:
            KeyError: If the name is unknown.
        """
        job_type = self._job_types.get(name)
        if job_type is None:
            raise KeyError(f"Unknown job type: {name}")
        return job_type

    def list_job_types(self) -> list[str]:
        """List all registered job type names."""
        return list(self._job_types.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._job_types

    def __len__(self) -> int:
        return len(self._job_types)
