"""
API request and response type definitions.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from vanity_queue.constants import JobStatus
from vanity_queue.types.job import JobProgress, KeypairResult


class KeypairRequest(BaseModel):
    """
    Request body for job submission and synchronous generation.

    All fields are loosely typed. The suffix is checked by the route so a
    bad value is a 400, and out-of-range or non-numeric `count` and
    `timeout` values are clamped to defaults, not rejected.
    """

    suffix: Any = Field(default=None, description="Required public key suffix")
    count: Any = Field(default=1, description="Number of keypairs (1-10)")
    timeout: Any = Field(
        default=None, description="Per-keypair timeout in milliseconds"
    )


class JobAcceptedResponse(BaseModel):
    """Response body after queueing a job."""

    id: str
    status: JobStatus
    queue_position: int | None
    message: str = "Job queued"


class JobResponse(BaseModel):
    """Full job details response."""

    id: str
    suffix: str
    count: int
    timeout_ms: int
    status: JobStatus
    progress: JobProgress
    results: list[KeypairResult]
    error: str | None
    queue_position: int | None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None
    completed_at: datetime | None


class JobSummary(BaseModel):
    """Job listing entry. Secret material is never included."""

    id: str
    suffix: str
    status: JobStatus
    progress: JobProgress
    queue_position: int | None
    created_at: datetime
    completed_at: datetime | None


class JobListResponse(BaseModel):
    """List of all known jobs."""

    jobs: list[JobSummary]
    total: int


class GenerateResponse(BaseModel):
    """Response body for synchronous generation."""

    success: bool = True
    count: int
    suffix: str
    total_time_ms: float
    keypairs: list[KeypairResult]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    running: int
    queued: int
    max_concurrent: int
    max_queue_depth: int
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None
    success: bool = False
