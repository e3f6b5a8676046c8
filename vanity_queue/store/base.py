"""
Job store interface.

The store is the single source of truth for job state. The scheduler only
holds identifiers and goes through this interface for every read and write.
"""

from abc import ABC, abstractmethod

from vanity_queue.types.job import Job


class JobStore(ABC):
    """Abstract async job store."""

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """
        Persist a new job.

        Raises:
            DuplicateJobError: If a job with the same id already exists.
        """

    @abstractmethod
    async def load(self, job_id: str) -> Job | None:
        """Load a job, returning None if it does not exist."""

    @abstractmethod
    async def save(self, job: Job) -> Job:
        """
        Overwrite the full record, stamping `updated_at`.

        Readers must never observe a partially written record.
        """

    @abstractmethod
    async def list_all(self) -> list[Job]:
        """Return every readable job, skipping corrupt records."""
