"""
Pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer
from prometheus_client import CollectorRegistry

from unique_job.config import Settings
from unique_job.jobs.catalog import JobCatalog
from unique_job.lock.policy import LockPolicy
from unique_job.observability.metrics import MetricsCollector
from unique_job.registry.static import StaticWorkerRegistry
from unique_job.store.redis_store import RedisLockStore

START_TIME = 1_700_000_000.0


class FakeClock:
    """Controllable epoch clock."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock frozen at a fixed epoch time."""
    return FakeClock()


@pytest.fixture
def redis_server() -> FakeServer:
    """Create an isolated in-memory Redis server."""
    return FakeServer()


@pytest_asyncio.fixture
async def redis_client(redis_server: FakeServer) -> AsyncGenerator[FakeAsyncRedis]:
    """Create an async Redis client bound to the test server."""
    client = FakeAsyncRedis(server=redis_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def store(redis_client: FakeAsyncRedis) -> RedisLockStore:
    """Create a lock store over the test Redis client."""
    return RedisLockStore(redis_client)


@pytest.fixture
def metrics_registry() -> CollectorRegistry:
    """Create an isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(metrics_registry: CollectorRegistry) -> MetricsCollector:
    """Create a metrics collector on the isolated registry."""
    return MetricsCollector(registry=metrics_registry)


@pytest.fixture
def catalog() -> JobCatalog:
    """Create a catalog with one plain and one leased job type."""
    catalog = JobCatalog()
    catalog.register("Job")
    catalog.register("AutoexpireLockJob", ttl_seconds=1)
    return catalog


@pytest.fixture
def worker_registry() -> StaticWorkerRegistry:
    """Create an empty in-memory worker registry."""
    return StaticWorkerRegistry()


@pytest.fixture
def policy(
    store: RedisLockStore,
    worker_registry: StaticWorkerRegistry,
    catalog: JobCatalog,
    clock: FakeClock,
    metrics: MetricsCollector,
) -> LockPolicy:
    """Create a lock policy wired to the test fixtures."""
    return LockPolicy(
        store=store,
        registry=worker_registry,
        catalog=catalog,
        clock=clock,
        metrics=metrics,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        redis_url="redis://localhost:6379/15",
        worker_registry_namespace="resque-test",
        lock_default_ttl_seconds=None,
        log_level="DEBUG",
        log_format="console",
    )
