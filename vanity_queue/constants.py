"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class JobStatus(StrEnum):
    """
    Job lifecycle states.

    State transitions:
    - QUEUED -> RUNNING (slot acquired)
    - RUNNING -> COMPLETE (all keypairs generated)
    - RUNNING -> FAILED (any generation attempt failed)

    QUEUED/RUNNING -> QUEUED only happens through startup recovery.
    """

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


ACTIVE_STATUSES = frozenset({JobStatus.QUEUED, JobStatus.RUNNING})
TERMINAL_STATUSES = frozenset({JobStatus.COMPLETE, JobStatus.FAILED})

# Request limits
MIN_COUNT = 1
MAX_COUNT = 10
DEFAULT_COUNT = 1

# Characters that base58 drops because they collide visually with others
BASE58_EXCLUDED_CHARS = frozenset("0OIl")

# ed25519 key sizes
SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64

# solana-vanity output markers
ADDRESS_PATTERN = r"Address:\s*([A-Za-z0-9]{32,50})"
PRIVATE_KEY_PATTERN = r"Private Key \(Base58\):\s*([A-Za-z0-9]{32,90})"
TIME_ELAPSED_PATTERN = r"Time elapsed:\s*([\d.]+)"

# Metrics names
METRIC_QUEUE_DEPTH = "vanity_queue_depth"
METRIC_RUNNING_JOBS = "vanity_running_jobs"
METRIC_JOBS_SUBMITTED = "vanity_jobs_submitted_total"
METRIC_JOBS_REJECTED = "vanity_jobs_rejected_total"
METRIC_JOBS_COMPLETED = "vanity_jobs_completed_total"
METRIC_JOBS_RECOVERED = "vanity_jobs_recovered_total"
METRIC_JOB_DURATION = "vanity_job_duration_seconds"
METRIC_KEYPAIR_DURATION = "vanity_keypair_generation_seconds"
METRIC_API_REQUESTS = "vanity_api_requests_total"
METRIC_API_LATENCY = "vanity_api_request_latency_seconds"

# Trace span names
SPAN_SUBMIT_JOB = "submit_job"
SPAN_EXECUTE_JOB = "execute_job"
SPAN_GENERATE_KEYPAIR = "generate_keypair"
SPAN_RECOVER_JOBS = "recover_jobs"
