"""
Type definitions for the job queue.
Contains persisted records and API request/response bodies.
"""

from vanity_queue.types.api import (
    ErrorResponse,
    KeypairRequest,
    GenerateResponse,
    HealthResponse,
    JobAcceptedResponse,
    JobListResponse,
    JobResponse,
    JobSummary,
)
from vanity_queue.types.job import (
    Job,
    JobProgress,
    KeypairResult,
    new_job_id,
    utc_now,
)

__all__ = [
    # API types
    "KeypairRequest",
    "GenerateResponse",
    "JobAcceptedResponse",
    "JobResponse",
    "JobSummary",
    "JobListResponse",
    "HealthResponse",
    "ErrorResponse",
    # Job types
    "Job",
    "JobProgress",
    "KeypairResult",
    "new_job_id",
    "utc_now",
]
