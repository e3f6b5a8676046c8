"""
Pytest configuration and shared fixtures.
"""

import asyncio
import shlex
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from prometheus_client import CollectorRegistry

from vanity_queue.api.main import create_app
from vanity_queue.config import Settings
from vanity_queue.constants import JobStatus
from vanity_queue.errors import GeneratorError
from vanity_queue.generator import GeneratorAdapter
from vanity_queue.observability.metrics import MetricsCollector
from vanity_queue.scheduler import Scheduler
from vanity_queue.store import FileJobStore, JobStore
from vanity_queue.types.job import Job, KeypairResult

FAKE_TOOL = Path(__file__).parent / "fixtures" / "fake_vanity.py"


class FakeGenerator:
    """
    In-process generator for scheduler tests.

    Each call can be held on `gate` until the test releases it, and the
    call numbered `fail_on` (1-based) raises `error`.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.fail_on: int | None = None
        self.error: GeneratorError = GeneratorError("boom")
        self.active = 0
        self.max_active = 0

    async def generate_one(self, suffix: str, timeout_ms: int) -> KeypairResult:
        self.calls.append(suffix)
        call_number = len(self.calls)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.fail_on == call_number:
                raise self.error
            return KeypairResult(
                public_key=f"Pub{call_number}{suffix}",
                secret_key=f"Sec{call_number}",
                generation_time_ms=1.0,
                tool_time_seconds=0.001,
            )
        finally:
            self.active -= 1

    generate_many = GeneratorAdapter.generate_many


async def wait_for(predicate, timeout: float = 20.0, interval: float = 0.02):
    """Poll an async predicate until it returns a truthy value."""
    deadline = asyncio.get_running_loop().time() + timeout
    while True:
        result = await predicate()
        if result:
            return result
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(interval)


async def wait_for_status(
    store: JobStore,
    job_id: str,
    *statuses: JobStatus,
    timeout: float = 20.0,
) -> Job:
    """Wait until a stored job reaches one of the given statuses."""

    async def check():
        job = await store.load(job_id)
        return job if job is not None and job.status in statuses else None

    return await wait_for(check, timeout=timeout)


@pytest.fixture
def fake_tool_command() -> list[str]:
    """argv running the fake solana-vanity script."""
    return [sys.executable, str(FAKE_TOOL)]


@pytest.fixture
def metrics() -> MetricsCollector:
    """Metrics collector on a private registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def jobs_dir(tmp_path: Path) -> Path:
    return tmp_path / "jobs"


@pytest.fixture
def store(jobs_dir: Path) -> FileJobStore:
    return FileJobStore(jobs_dir)


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest_asyncio.fixture
async def scheduler(
    store: FileJobStore,
    fake_generator: FakeGenerator,
    metrics: MetricsCollector,
) -> AsyncGenerator[Scheduler]:
    """Scheduler with one slot and room for three waiting jobs."""
    scheduler = Scheduler(
        store=store,
        generator=fake_generator,
        max_concurrent=1,
        max_queue_depth=3,
        metrics=metrics,
    )
    yield scheduler
    await scheduler.shutdown()


@pytest.fixture
def test_settings(jobs_dir: Path, fake_tool_command: list[str]) -> Settings:
    """Settings pointing at a temporary job directory and the fake tool."""
    return Settings(
        jobs_dir=str(jobs_dir),
        generator_command=shlex.join(fake_tool_command),
        max_concurrent=1,
        max_queue_depth=2,
        timeout_ms=30_000,
        max_timeout_ms=60_000,
        log_level="DEBUG",
        log_format="console",
        otel_exporter_otlp_endpoint=None,
    )


@pytest_asyncio.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    """A FastAPI app with its lifespan (including recovery) running."""
    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
