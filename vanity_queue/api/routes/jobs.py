"""
Job queue routes.
"""

import logging

from fastapi import APIRouter, status

from vanity_queue.api.dependencies import AppSettings, SchedulerDep, StoreDep
from vanity_queue.api.validation import clamp_count, clamp_timeout, validate_suffix
from vanity_queue.errors import JobNotFound
from vanity_queue.types.api import (
    JobAcceptedResponse,
    JobListResponse,
    JobResponse,
    JobSummary,
    KeypairRequest,
)
from vanity_queue.types.job import Job

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post(
    "",
    response_model=JobAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a job",
    description="Queue a vanity keypair search. Poll the job for results.",
)
async def submit_job(
    request: KeypairRequest,
    settings: AppSettings,
    scheduler: SchedulerDep,
) -> JobAcceptedResponse:
    """
    Validate a request and queue it.

    Raises:
        InvalidSuffix: If the suffix can never match (400).
        QueueFull: If the queue is at its maximum depth (429).
    """
    suffix = validate_suffix(request.suffix, settings.max_suffix_length)
    job = Job.new(
        suffix=suffix,
        count=clamp_count(request.count),
        timeout_ms=clamp_timeout(request.timeout, settings.timeout_ms, settings.max_timeout_ms),
    )

    job = await scheduler.submit(job)

    return JobAcceptedResponse(
        id=job.id,
        status=job.status,
        queue_position=job.queue_position,
    )


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    summary="Get job details",
    description="Get the full record of a job, including generated keys.",
)
async def get_job(job_id: str, store: StoreDep) -> JobResponse:
    """
    Get job details by ID.

    Raises:
        JobNotFound: If no job has this id (404).
    """
    job = await store.load(job_id)
    if job is None:
        raise JobNotFound(job_id)

    return JobResponse.model_validate(job.model_dump())


@router.get(
    "",
    response_model=JobListResponse,
    summary="List jobs",
    description="List every job, newest first. Secret keys are not included.",
)
async def list_jobs(store: StoreDep) -> JobListResponse:
    jobs = await store.list_all()
    jobs.sort(key=lambda job: job.created_at, reverse=True)

    return JobListResponse(
        jobs=[
            JobSummary(
                id=job.id,
                suffix=job.suffix,
                status=job.status,
                progress=job.progress,
                queue_position=job.queue_position,
                created_at=job.created_at,
                completed_at=job.completed_at,
            )
            for job in jobs
        ],
        total=len(jobs),
    )
