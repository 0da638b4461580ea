"""
Job type and lease type definitions.
"""

from dataclasses import dataclass, field

from unique_job.constants import LockState


@dataclass(frozen=True)
class LeaseConfig:
    """
    Lease configuration for a job type.

    A lease attaches a TTL to the admission lock, after which the lock is
    treated as never acquired. With no TTL (or a TTL <= 0) locks never
    auto-expire.
    """

    ttl_seconds: int | None = None

    @classmethod
    def from_value(cls, value: int | bool | None) -> "LeaseConfig":
        """
        Build a lease from a loose configuration value.

        Args:
            value: TTL in seconds, or None/False to disable.

        Returns:
            LeaseConfig: The lease configuration.

        Raises:
            ValueError: If value is True, which names no TTL.
        """
        if value is None or value is False:
            return cls()
        if value is True:
            raise ValueError("Lease TTL must be a number of seconds, not True")
        return cls(ttl_seconds=int(value))

    @property
    def enabled(self) -> bool:
        """Check if locks under this lease expire."""
        return self.ttl_seconds is not None and self.ttl_seconds > 0

    def cutoff(self, now: float) -> int:
        """
        Get the oldest lock timestamp still considered live.

        Args:
            now: Current epoch time in seconds.

        Returns:
            Epoch seconds; stored timestamps strictly below are expired.
        """
        if not self.enabled:
            raise ValueError("Lease is disabled; no expiry cutoff")
        return int(now) - self.ttl_seconds


@dataclass(frozen=True)
class JobType:
    """
    Descriptor for a job type guarded by unique locks.
    Immutable once defined; registered in a JobCatalog.
    """

    name: str
    lease: LeaseConfig = field(default_factory=LeaseConfig)

    @property
    def ttl(self) -> int | None:
        """Lease TTL in seconds, or None when locks never expire."""
        return self.lease.ttl_seconds if self.lease.enabled else None


@dataclass
class LockSnapshot:
    """
    Point-in-time view of the locks for one job signature.
    Values are the stored timestamps after lease evaluation.
    """

    lock_key: str
    run_lock_key: str
    admitted_at: int | None
    started_at: int | None

    @property
    def state(self) -> LockState:
        """Derive the lifecycle state from the stored values."""
        if self.started_at is not None:
            return LockState.RUNNING
        if self.admitted_at is not None:
            return LockState.ADMITTED
        return LockState.FREE
