"""
Unit tests for atomic stale lock theft.
"""

import asyncio

import pytest

from unique_job.lock.identity import lock_key, run_lock_key
from unique_job.lock.reclaim import AtomicReclaimer, next_lock_value

KEY = lock_key("Job", ["hello"])
RUN_KEY = run_lock_key(KEY)


class TestNextLockValue:
    """Tests for next_lock_value."""

    def test_uses_current_time(self):
        """Test the new value is the current whole second."""
        assert next_lock_value(None, 1000.7) == 1000
        assert next_lock_value(990, 1000.7) == 1000

    def test_bumps_when_equal(self):
        """Test the new value always differs from the old one."""
        assert next_lock_value(1000, 1000.2) == 1001


class TestAtomicReclaimer:
    """Tests for AtomicReclaimer."""

    @pytest.fixture
    def reclaimer(self, store, metrics) -> AtomicReclaimer:
        """Create a reclaimer."""
        return AtomicReclaimer(store, metrics=metrics)

    async def test_steals_unchanged_lock(self, reclaimer: AtomicReclaimer, store):
        """Test an unchanged stale lock is taken over."""
        await store.set(KEY, 100)
        await store.set(RUN_KEY, 100)

        won = await reclaimer.reclaim(KEY, RUN_KEY, 100, 200)

        assert won is True
        assert await store.get(KEY) == "200"
        assert await store.get(RUN_KEY) is None

    async def test_changed_lock_is_left_alone(self, reclaimer: AtomicReclaimer, store):
        """Test nothing changes when another process moved the lock."""
        await store.set(KEY, 110)
        await store.set(RUN_KEY, 100)

        won = await reclaimer.reclaim(KEY, RUN_KEY, 100, 200)

        assert won is False
        assert await store.get(KEY) == "110"
        assert await store.get(RUN_KEY) == "100"

    async def test_deleted_lock_is_left_alone(self, reclaimer: AtomicReclaimer, store):
        """Test a lock released since detection is not recreated."""
        won = await reclaimer.reclaim(KEY, RUN_KEY, 100, 200)

        assert won is False
        assert await store.get(KEY) is None

    async def test_concurrent_theft_has_one_winner(
        self,
        reclaimer: AtomicReclaimer,
        store,
        metrics_registry,
    ):
        """Test two thieves with the same baton produce exactly one winner."""
        await store.set(KEY, 100)
        await store.set(RUN_KEY, 100)

        results = await asyncio.gather(
            reclaimer.reclaim(KEY, RUN_KEY, 100, 201, job_type="Job"),
            reclaimer.reclaim(KEY, RUN_KEY, 100, 202, job_type="Job"),
        )

        assert sorted(results) == [False, True]
        winner_value = 201 if results[0] else 202
        assert await store.get(KEY) == str(winner_value)
        assert metrics_registry.get_sample_value(
            "lock_steal_attempts_total", {"job_type": "Job", "result": "won"}
        ) == 1.0
        assert metrics_registry.get_sample_value(
            "lock_steal_attempts_total", {"job_type": "Job", "result": "lost"}
        ) == 1.0
