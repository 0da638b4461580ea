"""
Unit tests for worker registry sources.
"""

import json

import pytest

from unique_job.registry.redis_registry import RedisWorkerRegistry
from unique_job.registry.static import StaticWorkerRegistry
from unique_job.types.registry import WorkerRegistryEntry


class TestStaticWorkerRegistry:
    """Tests for StaticWorkerRegistry."""

    async def test_add_and_snapshot(self):
        """Test added entries appear in the snapshot."""
        registry = StaticWorkerRegistry()
        registry.add("worker-1", "Job", ["hello"], queue="job_test")

        entries = await registry.snapshot()

        assert entries == [
            WorkerRegistryEntry(
                worker_id="worker-1",
                job_type="Job",
                args=["hello"],
                queue="job_test",
            )
        ]

    async def test_remove(self):
        """Test removed workers leave the snapshot."""
        registry = StaticWorkerRegistry()
        registry.add("worker-1", "Job", ["hello"])
        registry.add("worker-2", "Job", ["bye"])

        registry.remove("worker-1")
        registry.remove("worker-unknown")

        entries = await registry.snapshot()
        assert [e.worker_id for e in entries] == ["worker-2"]

    async def test_initial_entries_and_clear(self):
        """Test constructing with entries and clearing them."""
        registry = StaticWorkerRegistry(
            [WorkerRegistryEntry(worker_id="worker-1", job_type="Job")]
        )
        assert len(await registry.snapshot()) == 1

        registry.clear()

        assert await registry.snapshot() == []


class TestRedisWorkerRegistry:
    """Tests for RedisWorkerRegistry."""

    @pytest.fixture
    def registry(self, redis_client, metrics) -> RedisWorkerRegistry:
        """Create a registry in the default namespace."""
        return RedisWorkerRegistry(redis_client, metrics=metrics)

    async def test_empty(self, registry: RedisWorkerRegistry):
        """Test no workers gives an empty snapshot."""
        assert await registry.snapshot() == []

    async def test_register_working(self, registry: RedisWorkerRegistry, redis_client):
        """Test registered work is stored in the Resque layout and read back."""
        await registry.register_working("host:1:job_test", "Job", ["hello"], queue="job_test")

        document = json.loads(await redis_client.get("resque:worker:host:1:job_test"))
        assert document["payload"] == {"class": "Job", "args": ["hello"]}
        assert document["queue"] == "job_test"

        entries = await registry.snapshot()
        assert entries == [
            WorkerRegistryEntry(
                worker_id="host:1:job_test",
                job_type="Job",
                args=["hello"],
                queue="job_test",
            )
        ]

    async def test_idle_workers_are_skipped(self, registry: RedisWorkerRegistry, redis_client):
        """Test workers without a job document are not in the snapshot."""
        await redis_client.sadd("resque:workers", "host:2:job_test")
        await registry.register_working("host:1:job_test", "Job", ["hello"])

        entries = await registry.snapshot()

        assert [e.worker_id for e in entries] == ["host:1:job_test"]

    async def test_unregister_working(self, registry: RedisWorkerRegistry, redis_client):
        """Test unregistered workers disappear."""
        await registry.register_working("host:1:job_test", "Job", ["hello"])

        await registry.unregister_working("host:1:job_test")

        assert await registry.snapshot() == []
        assert await redis_client.smembers("resque:workers") == set()

    async def test_malformed_entries_are_skipped(
        self,
        registry: RedisWorkerRegistry,
        redis_client,
        metrics_registry,
    ):
        """Test unparseable documents are skipped rather than raising."""
        await redis_client.sadd("resque:workers", "bad-json", "bad-payload")
        await redis_client.set("resque:worker:bad-json", "{not json")
        await redis_client.set("resque:worker:bad-payload", json.dumps({"payload": {"args": []}}))
        await registry.register_working("good", "Job", [1, {"a": "b"}])

        entries = await registry.snapshot()

        assert [e.worker_id for e in entries] == ["good"]
        assert entries[0].args == [1, {"a": "b"}]
        assert metrics_registry.get_sample_value(
            "registry_entries_skipped_total", {"reason": "malformed"}
        ) == 2.0

    async def test_custom_namespace(self, redis_client, metrics):
        """Test the namespace prefixes every key."""
        registry = RedisWorkerRegistry(redis_client, namespace="myapp", metrics=metrics)

        await registry.register_working("w1", "Job", [])

        assert await redis_client.smembers("myapp:workers") == {"w1"}
        assert registry.worker_key("w1") == "myapp:worker:w1"
