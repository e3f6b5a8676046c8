"""
Startup recovery for interrupted jobs.

Runs once, before the service accepts traffic. Jobs left queued or running
by a previous process are reset and queued again in creation order. The
tool has no mid-search checkpoint, so partial results are discarded.
"""

import logging

from vanity_queue.constants import ACTIVE_STATUSES, SPAN_RECOVER_JOBS
from vanity_queue.observability.metrics import MetricsCollector, get_metrics
from vanity_queue.observability.tracing import get_tracer
from vanity_queue.scheduler import Scheduler
from vanity_queue.store.base import JobStore

logger = logging.getLogger(__name__)


class Recovery:
    """
    Re-queues jobs interrupted by a previous process.

    Runs once to:
    1. Find jobs persisted as QUEUED or RUNNING
    2. Reset their progress and results
    3. Submit them to the scheduler, oldest first, bypassing the depth limit
    """

    def __init__(
        self,
        store: JobStore,
        scheduler: Scheduler,
        metrics: MetricsCollector | None = None,
    ):
        self._store = store
        self._scheduler = scheduler
        self._metrics = metrics or get_metrics()

    async def run_once(self) -> int:
        """
        Recover interrupted jobs.

        Returns:
            Number of jobs re-queued.
        """
        with get_tracer().start_as_current_span(SPAN_RECOVER_JOBS) as span:
            jobs = await self._store.list_all()
            interrupted = [job for job in jobs if job.status in ACTIVE_STATUSES]

            for job in interrupted:
                previous = job.status
                job.reset_for_recovery()
                await self._store.save(job)
                logger.info(
                    "Reset interrupted job",
                    extra={"job_id": job.id, "previous_status": previous},
                )

            interrupted.sort(key=lambda job: job.created_at)
            for job in interrupted:
                await self._scheduler.submit(job, recovered=True)

            span.set_attribute("recovered", len(interrupted))

        if interrupted:
            self._metrics.record_jobs_recovered(len(interrupted))
            logger.info(f"Recovered {len(interrupted)} interrupted jobs")
        else:
            logger.info("No interrupted jobs to recover")

        return len(interrupted)
