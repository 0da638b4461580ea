"""
Unit tests for lease configuration and application.
"""

import pytest

from unique_job.lock.lease import apply_lease
from unique_job.store.redis_store import RedisLockStore
from unique_job.types.job import JobType, LeaseConfig


class TestLeaseConfig:
    """Tests for LeaseConfig."""

    def test_default_is_disabled(self):
        """Test a lease without TTL never expires."""
        assert LeaseConfig().enabled is False

    @pytest.mark.parametrize("value", [None, False, 0, -5])
    def test_disabled_values(self, value):
        """Test absent, false, zero and negative TTLs disable the lease."""
        assert LeaseConfig.from_value(value).enabled is False

    def test_true_is_rejected(self):
        """Test True is not accepted as a TTL."""
        with pytest.raises(ValueError):
            LeaseConfig.from_value(True)

    def test_enabled(self):
        """Test a positive TTL enables the lease."""
        lease = LeaseConfig.from_value(30)

        assert lease.enabled is True
        assert lease.ttl_seconds == 30

    def test_cutoff(self):
        """Test the cutoff is now minus TTL in whole seconds."""
        lease = LeaseConfig(ttl_seconds=10)

        assert lease.cutoff(1000.9) == 990

    def test_cutoff_disabled_raises(self):
        """Test asking a disabled lease for a cutoff is an error."""
        with pytest.raises(ValueError):
            LeaseConfig().cutoff(1000)

    def test_job_type_ttl(self):
        """Test JobType exposes the effective TTL."""
        assert JobType("Job").ttl is None
        assert JobType("Job", LeaseConfig(ttl_seconds=0)).ttl is None
        assert JobType("Job", LeaseConfig(ttl_seconds=5)).ttl == 5


class TestApplyLease:
    """Tests for apply_lease."""

    async def test_sets_expiry(self, store: RedisLockStore, redis_client):
        """Test an enabled lease sets a TTL on the lock."""
        await store.set("lock:Job-[]", 100)

        applied = await apply_lease(store, "lock:Job-[]", LeaseConfig(ttl_seconds=60))

        assert applied is True
        ttl = await redis_client.ttl("lock:Job-[]")
        assert 0 < ttl <= 60

    async def test_disabled_leaves_lock_persistent(self, store: RedisLockStore, redis_client):
        """Test a disabled lease sets no TTL."""
        await store.set("lock:Job-[]", 100)

        applied = await apply_lease(store, "lock:Job-[]", LeaseConfig())

        assert applied is False
        assert await redis_client.ttl("lock:Job-[]") == -1

    async def test_absent_key_is_noop(self, store: RedisLockStore):
        """Test applying a lease to a missing key does nothing."""
        applied = await apply_lease(store, "lock:missing", LeaseConfig(ttl_seconds=60))

        assert applied is False
