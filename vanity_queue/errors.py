"""
Exception hierarchy for the job queue.

Every error the service raises on purpose derives from VanityQueueError,
so the API layer can translate them to responses in one place.
"""


class VanityQueueError(Exception):
    """Base class for all service errors."""


class InvalidInput(VanityQueueError):
    """Request rejected before any state was touched."""


class QueueFull(VanityQueueError):
    """The pending queue has reached its configured depth."""

    def __init__(self, max_depth: int):
        super().__init__(f"Queue is full ({max_depth} jobs waiting). Try again later.")
        self.max_depth = max_depth


class JobNotFound(VanityQueueError):
    """No job exists with the requested identifier."""

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class JobStoreError(VanityQueueError, IOError):
    """The job store could not read or write a record."""


class DuplicateJobError(JobStoreError):
    """A record with the same identifier already exists."""

    def __init__(self, job_id: str):
        super().__init__(f"Job already exists: {job_id}")
        self.job_id = job_id


class GeneratorError(VanityQueueError):
    """A single keypair generation attempt failed."""


class GenerationTimeout(GeneratorError):
    """The external tool ran past its time budget and was killed."""

    def __init__(self, timeout_ms: int):
        super().__init__(f"Generation timed out after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class ToolFailure(GeneratorError):
    """The external tool could not be started or exited non-zero."""


class ParseFailure(GeneratorError):
    """The tool's output did not contain a usable address and key."""


class IntegrityFailure(GeneratorError):
    """The keypair reported by the tool is internally inconsistent."""
