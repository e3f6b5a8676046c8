"""
Unit tests for startup recovery.
"""

import asyncio
from datetime import timedelta

from tests.conftest import FakeGenerator, wait_for_status
from vanity_queue.constants import JobStatus
from vanity_queue.recovery import Recovery
from vanity_queue.scheduler import Scheduler
from vanity_queue.store import FileJobStore
from vanity_queue.types.job import Job, KeypairResult, utc_now


async def persist(
    store: FileJobStore,
    status: JobStatus,
    age_minutes: int,
    completed: int = 0,
    count: int = 3,
) -> Job:
    """Write a job as a previous process would have left it."""
    job = Job.new(suffix="ab", count=count, timeout_ms=1_000)
    job.created_at = utc_now() - timedelta(minutes=age_minutes)
    job.status = status
    for i in range(completed):
        job.add_result(
            KeypairResult(public_key=f"Old{i}", secret_key="Sec", generation_time_ms=1.0)
        )
    if status == JobStatus.RUNNING:
        job.started_at = utc_now()
    if status == JobStatus.FAILED:
        job.error = "earlier failure"
    await store.create(job)
    return job


class TestRecovery:
    """Tests for Recovery.run_once."""

    async def test_requeues_interrupted_jobs_in_creation_order(
        self,
        scheduler: Scheduler,
        store: FileJobStore,
        fake_generator: FakeGenerator,
        metrics,
    ):
        """Interrupted jobs are queued oldest first."""
        fake_generator.gate = asyncio.Event()
        newest = await persist(store, JobStatus.QUEUED, age_minutes=1)
        oldest = await persist(store, JobStatus.RUNNING, age_minutes=30, completed=2)
        middle = await persist(store, JobStatus.QUEUED, age_minutes=10)

        recovered = await Recovery(store, scheduler, metrics=metrics).run_once()

        assert recovered == 3

        # The oldest job takes the only slot; the rest wait in creation order
        running = await wait_for_status(store, oldest.id, JobStatus.RUNNING)
        assert running.progress.completed == 0
        assert running.results == []
        assert scheduler.queued_ids == [middle.id, newest.id]
        assert (await store.load(middle.id)).queue_position == 1
        assert (await store.load(newest.id)).queue_position == 2

        fake_generator.gate.set()
        await scheduler.wait_idle()

        for job in (oldest, middle, newest):
            done = await store.load(job.id)
            assert done.status == JobStatus.COMPLETE
            assert done.progress.completed == 3
            assert all(not r.public_key.startswith("Old") for r in done.results)

    async def test_reset_discards_partial_work(
        self,
        scheduler: Scheduler,
        store: FileJobStore,
        fake_generator: FakeGenerator,
        metrics,
    ):
        """Recovered jobs start again from zero."""
        fake_generator.gate = asyncio.Event()
        first = await persist(store, JobStatus.RUNNING, age_minutes=20, completed=1)
        second = await persist(store, JobStatus.RUNNING, age_minutes=10, completed=2)

        await Recovery(store, scheduler, metrics=metrics).run_once()
        await wait_for_status(store, first.id, JobStatus.RUNNING)

        waiting = await store.load(second.id)
        assert waiting.status == JobStatus.QUEUED
        assert waiting.progress.completed == 0
        assert waiting.results == []
        assert waiting.started_at is None
        assert waiting.error is None

        fake_generator.gate.set()
        await scheduler.wait_idle()

    async def test_terminal_jobs_untouched(
        self,
        scheduler: Scheduler,
        store: FileJobStore,
        fake_generator: FakeGenerator,
        metrics,
    ):
        """Complete and failed jobs are left alone."""
        complete = await persist(store, JobStatus.COMPLETE, age_minutes=5, completed=3)
        failed = await persist(store, JobStatus.FAILED, age_minutes=5, completed=1)
        before = {job.id: (await store.load(job.id)) for job in (complete, failed)}

        recovered = await Recovery(store, scheduler, metrics=metrics).run_once()

        assert recovered == 0
        assert fake_generator.calls == []
        for job_id, original in before.items():
            assert await store.load(job_id) == original

    async def test_bypasses_queue_depth(
        self,
        store: FileJobStore,
        fake_generator: FakeGenerator,
        metrics,
    ):
        """Recovery is not limited by the queue depth."""
        scheduler = Scheduler(store, fake_generator, max_concurrent=1, max_queue_depth=1, metrics=metrics)
        fake_generator.gate = asyncio.Event()
        try:
            jobs = [await persist(store, JobStatus.QUEUED, age_minutes=m) for m in (5, 4, 3, 2)]

            recovered = await Recovery(store, scheduler, metrics=metrics).run_once()

            assert recovered == 4
            assert scheduler.queued_ids == [job.id for job in jobs[1:]]

            fake_generator.gate.set()
            await scheduler.wait_idle()
        finally:
            await scheduler.shutdown()

    async def test_corrupt_records_do_not_block_recovery(
        self,
        scheduler: Scheduler,
        store: FileJobStore,
        metrics,
    ):
        """A corrupt file does not stop the others recovering."""
        job = await persist(store, JobStatus.RUNNING, age_minutes=1, count=1)
        (store.directory / f"{'a' * 32}.json").write_text("{truncated", encoding="utf-8")

        recovered = await Recovery(store, scheduler, metrics=metrics).run_once()

        assert recovered == 1
        await wait_for_status(store, job.id, JobStatus.COMPLETE)
