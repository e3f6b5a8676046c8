"""
Job scheduler.

Holds the FIFO list of pending job ids and runs at most `max_concurrent`
jobs at a time against the generator. The job store stays the source of
truth: every state change reloads the record before writing it back.
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from vanity_queue.constants import SPAN_EXECUTE_JOB, SPAN_SUBMIT_JOB, JobStatus
from vanity_queue.errors import GeneratorError, JobStoreError, QueueFull
from vanity_queue.observability.metrics import MetricsCollector, get_metrics
from vanity_queue.observability.tracing import get_tracer
from vanity_queue.store.base import JobStore
from vanity_queue.types.job import Job, KeypairResult, utc_now

logger = logging.getLogger(__name__)


class Generator(Protocol):
    """What the scheduler needs from a keypair generator."""

    async def generate_many(
        self,
        suffix: str,
        count: int,
        timeout_ms: int,
        on_result: Callable[[KeypairResult], Awaitable[None]] | None = None,
    ) -> list[KeypairResult]:
        ...


@dataclass
class SchedulerStats:
    """Snapshot of the scheduler's counters."""

    running: int
    queued: int
    max_concurrent: int
    max_queue_depth: int


class Scheduler:
    """
    Concurrency-bounded FIFO job scheduler.

    Features:
    - Admission control against a maximum queue depth
    - At most `max_concurrent` jobs running at once
    - Progress persisted after every generated keypair
    - Live queue positions written back to waiting jobs
    """

    def __init__(
        self,
        store: JobStore,
        generator: Generator,
        max_concurrent: int,
        max_queue_depth: int,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            store: Job store holding the authoritative records.
            generator: Keypair generator used to run jobs.
            max_concurrent: Maximum number of jobs running at once.
            max_queue_depth: Maximum number of jobs waiting to run.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if max_queue_depth < 0:
            raise ValueError("max_queue_depth must not be negative")

        self.store = store
        self.generator = generator
        self.max_concurrent = max_concurrent
        self.max_queue_depth = max_queue_depth

        self._queue: deque[str] = deque()
        self._running = 0
        self._lock = asyncio.Lock()
        self._tasks: dict[str, asyncio.Task] = {}
        self._idle = asyncio.Event()
        self._idle.set()
        self._closed = False
        self._metrics = metrics or get_metrics()

    @property
    def queued_ids(self) -> list[str]:
        """Identifiers waiting to run, front of the queue first."""
        return list(self._queue)

    @property
    def running_count(self) -> int:
        return self._running

    def stats(self) -> SchedulerStats:
        """Current counters and limits."""
        return SchedulerStats(
            running=self._running,
            queued=len(self._queue),
            max_concurrent=self.max_concurrent,
            max_queue_depth=self.max_queue_depth,
        )

    async def submit(self, job: Job, recovered: bool = False) -> Job:
        """
        Persist a job as queued and append it to the queue.

        Args:
            job: The job to queue.
            recovered: Set by startup recovery. Skips the depth check and
                overwrites the existing record instead of creating one.

        Returns:
            The persisted job, with its queue position.

        Raises:
            QueueFull: If the queue is at its maximum depth.
        """
        with get_tracer().start_as_current_span(SPAN_SUBMIT_JOB) as span:
            span.set_attribute("job_id", job.id)
            span.set_attribute("recovered", recovered)

            async with self._lock:
                if not recovered and len(self._queue) >= self.max_queue_depth:
                    self._metrics.record_job_rejected("queue_full")
                    raise QueueFull(self.max_queue_depth)

                job.status = JobStatus.QUEUED
                job.queue_position = len(self._queue) + 1

                if recovered:
                    await self.store.save(job)
                else:
                    await self.store.create(job)

                self._queue.append(job.id)
                self._idle.clear()
                self._metrics.record_job_submitted()
                self._update_gauges()

        logger.info(
            "Job queued",
            extra={
                "job_id": job.id,
                "suffix": job.suffix,
                "count": job.count,
                "queue_position": job.queue_position,
                "recovered": recovered,
            },
        )

        await self.dispatch()
        return job

    async def dispatch(self) -> None:
        """
        Start queued jobs while there are free slots.

        Safe to call at any time; the queue is only touched under the lock,
        so concurrent calls never pop the same id or exceed the limit.
        """
        async with self._lock:
            if self._closed:
                return

            started: list[str] = []
            while self._running < self.max_concurrent and self._queue:
                started.append(self._queue.popleft())
                self._running += 1

            if not started:
                return

            self._update_gauges()
            try:
                await self._update_positions(started)
            finally:
                for job_id in started:
                    self._tasks[job_id] = asyncio.create_task(
                        self._run_slot(job_id), name=f"job-{job_id}"
                    )

    async def run_job(self, job_id: str) -> Job | None:
        """
        Execute a job: mark it running, generate each keypair in turn and
        persist the terminal state.

        A generator failure fails the whole job. Keypairs produced before
        the failure stay in the record.

        Returns:
            The final job record, or None if the job no longer exists.
        """
        start_time = time.monotonic()

        job = await self.store.load(job_id)
        if job is None:
            logger.warning("Dispatched job not found", extra={"job_id": job_id})
            return None
        if job.status != JobStatus.QUEUED:
            logger.warning(
                "Dispatched job is not queued",
                extra={"job_id": job_id, "status": job.status},
            )
            return job

        job.status = JobStatus.RUNNING
        job.queue_position = None
        job.started_at = utc_now()
        await self.store.save(job)

        logger.info(
            "Executing job",
            extra={"job_id": job_id, "suffix": job.suffix, "count": job.count},
        )

        async def record_result(result: KeypairResult) -> None:
            current = await self._reload(job_id)
            current.add_result(result)
            await self.store.save(current)
            logger.info(
                "Keypair generated",
                extra={
                    "job_id": job_id,
                    "completed": current.progress.completed,
                    "total": current.progress.total,
                },
            )

        with get_tracer().start_as_current_span(SPAN_EXECUTE_JOB) as span:
            span.set_attribute("job_id", job_id)
            span.set_attribute("suffix", job.suffix)
            span.set_attribute("count", job.count)

            try:
                await self.generator.generate_many(
                    job.suffix, job.count, job.timeout_ms, on_result=record_result
                )
            except GeneratorError as e:
                span.set_attribute("error", str(e))
                return await self._finish(job_id, JobStatus.FAILED, start_time, error=str(e))

        return await self._finish(job_id, JobStatus.COMPLETE, start_time)

    async def wait_idle(self) -> None:
        """Wait until nothing is queued or running."""
        await self._idle.wait()

    async def shutdown(self) -> None:
        """
        Stop dispatching and cancel running jobs.

        Cancelled jobs keep their persisted status and are picked up by
        recovery on the next start.
        """
        async with self._lock:
            self._closed = True
            tasks = list(self._tasks.values())

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(
            "Scheduler stopped",
            extra={"cancelled": len(tasks), "queued": len(self._queue)},
        )

    async def _run_slot(self, job_id: str) -> None:
        """Run one job in a concurrency slot and hand the slot on."""
        try:
            await self.run_job(job_id)
        except asyncio.CancelledError:
            logger.info("Job cancelled", extra={"job_id": job_id})
            raise
        except Exception as e:
            logger.exception(
                "Exception executing job",
                extra={"job_id": job_id, "error": str(e)},
            )
            await self._mark_failed_after_error(job_id, e)
        finally:
            self._tasks.pop(job_id, None)
            self._running -= 1
            self._update_gauges()
            try:
                if not self._closed:
                    await self.dispatch()
            finally:
                if self._running == 0 and not self._queue:
                    self._idle.set()

    async def _finish(
        self,
        job_id: str,
        status: JobStatus,
        start_time: float,
        error: str | None = None,
    ) -> Job:
        """Persist a terminal state."""
        job = await self._reload(job_id)
        job.status = status
        job.error = error
        job.completed_at = utc_now()
        await self.store.save(job)

        duration = time.monotonic() - start_time
        self._metrics.record_job_completed(status.value, duration)

        if status == JobStatus.COMPLETE:
            logger.info(
                "Job completed successfully",
                extra={"job_id": job_id, "duration": f"{duration:.2f}s"},
            )
        else:
            logger.warning(
                "Job failed",
                extra={
                    "job_id": job_id,
                    "error": error,
                    "completed": job.progress.completed,
                    "total": job.progress.total,
                },
            )
        return job

    async def _mark_failed_after_error(self, job_id: str, exc: Exception) -> None:
        """Best-effort attempt to record an unexpected error on the job."""
        try:
            job = await self.store.load(job_id)
            if job is None or job.is_terminal:
                return
            job.status = JobStatus.FAILED
            job.error = f"Scheduler error: {exc}"
            job.queue_position = None
            job.completed_at = utc_now()
            await self.store.save(job)
        except Exception:
            logger.exception("Failed to mark job as failed", extra={"job_id": job_id})

    async def _reload(self, job_id: str) -> Job:
        job = await self.store.load(job_id)
        if job is None:
            raise RuntimeError(f"Job {job_id} disappeared from the store while running")
        return job

    async def _update_positions(self, dispatched: list[str]) -> None:
        """
        Persist queue positions after jobs leave the queue. Caller holds the lock.

        Dispatched jobs drop their position before the waiting ones move up,
        so no two queued records share a position. Positions are derived from
        the queue; a failed write is logged and dispatch carries on.
        """
        try:
            for job_id in dispatched:
                await self._set_position(job_id, None)
            for index, job_id in enumerate(list(self._queue), start=1):
                await self._set_position(job_id, index)
        except JobStoreError:
            logger.exception(
                "Failed to update queue positions",
                extra={"dispatched": dispatched, "queued": len(self._queue)},
            )

    async def _set_position(self, job_id: str, position: int | None) -> None:
        job = await self.store.load(job_id)
        if job is None or job.queue_position == position:
            return
        job.queue_position = position
        await self.store.save(job)

    def _update_gauges(self) -> None:
        self._metrics.update_queue_state(queued=len(self._queue), running=self._running)
