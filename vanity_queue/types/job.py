"""
Job record type definitions.

The Job model is the persisted representation of a unit of work; the
job store serializes it to JSON as-is.
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field

from vanity_queue.constants import JobStatus


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_job_id() -> str:
    """Generate a fresh job identifier."""
    return uuid4().hex


class KeypairResult(BaseModel):
    """A single generated keypair with timing metadata."""

    public_key: str
    secret_key: str
    generation_time_ms: float
    tool_time_seconds: float | None = None


class JobProgress(BaseModel):
    """Progress counters for a job."""

    completed: int = 0
    total: int


class Job(BaseModel):
    """
    A vanity keypair search job.

    `suffix`, `count` and `timeout_ms` are fixed at creation. `results`
    only grows while the job is running, and `progress.completed` always
    matches `len(results)` when the record is saved.
    """

    id: str = Field(default_factory=new_job_id)
    suffix: str
    count: int
    timeout_ms: int
    status: JobStatus = JobStatus.QUEUED
    progress: JobProgress
    results: list[KeypairResult] = Field(default_factory=list)
    error: str | None = None
    queue_position: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def new(cls, suffix: str, count: int, timeout_ms: int) -> "Job":
        """Create a fresh queued job."""
        return cls(
            suffix=suffix,
            count=count,
            timeout_ms=timeout_ms,
            progress=JobProgress(total=count),
        )

    @property
    def is_terminal(self) -> bool:
        """Check if the job has reached complete or failed."""
        return self.status in (JobStatus.COMPLETE, JobStatus.FAILED)

    def add_result(self, result: KeypairResult) -> None:
        """Append a generated keypair and advance progress."""
        self.results.append(result)
        self.progress.completed = len(self.results)

    def reset_for_recovery(self) -> None:
        """Discard partial work so the job can be queued again from scratch."""
        self.status = JobStatus.QUEUED
        self.results = []
        self.progress.completed = 0
        self.error = None
        self.queue_position = None
        self.started_at = None
        self.completed_at = None
