"""
File-backed job store.

Each job lives in its own `<id>.json` file. Writes go to a temporary file
in the same directory and are moved into place with os.replace, so a
reader sees either the old record or the new one.
"""

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

from pydantic import ValidationError

from vanity_queue.errors import DuplicateJobError, JobStoreError
from vanity_queue.store.base import JobStore
from vanity_queue.types.job import Job, utc_now

logger = logging.getLogger(__name__)

_JOB_ID_RE = re.compile(r"^[0-9a-f]{32}$")
_SUFFIX = ".json"
_TMP_PREFIX = ".tmp-"


class FileJobStore(JobStore):
    """
    Job store keeping one JSON document per job in a directory.

    Blocking file operations run in a worker thread so every store call
    yields to the event loop.
    """

    def __init__(self, directory: str | os.PathLike[str]):
        """
        Initialize the store, creating the directory if needed.

        Args:
            directory: Directory holding the job files.
        """
        self._dir = Path(directory)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise JobStoreError(f"Cannot create job directory {self._dir}: {e}") from e

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, job_id: str) -> Path:
        """Path of the file holding the given job."""
        return self._dir / f"{job_id}{_SUFFIX}"

    async def create(self, job: Job) -> Job:
        return await asyncio.to_thread(self._create_sync, job)

    async def load(self, job_id: str) -> Job | None:
        return await asyncio.to_thread(self._load_sync, job_id)

    async def save(self, job: Job) -> Job:
        job.updated_at = utc_now()
        await asyncio.to_thread(self._write_sync, job)
        return job

    async def list_all(self) -> list[Job]:
        return await asyncio.to_thread(self._list_sync)

    def _create_sync(self, job: Job) -> Job:
        if not _JOB_ID_RE.match(job.id):
            raise JobStoreError(f"Invalid job id: {job.id!r}")
        if self.path_for(job.id).exists():
            raise DuplicateJobError(job.id)
        job.updated_at = utc_now()
        self._write_sync(job)
        return job

    def _load_sync(self, job_id: str) -> Job | None:
        if not _JOB_ID_RE.match(job_id):
            return None
        path = self.path_for(job_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise JobStoreError(f"Cannot read job {job_id}: {e}") from e

        try:
            return Job.model_validate_json(raw)
        except ValidationError as e:
            raise JobStoreError(f"Corrupt job record {job_id}: {e}") from e

    def _write_sync(self, job: Job) -> None:
        data = job.model_dump_json(indent=2)
        fd, tmp_path = tempfile.mkstemp(
            prefix=_TMP_PREFIX, suffix=_SUFFIX, dir=self._dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path_for(job.id))
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise JobStoreError(f"Cannot write job {job.id}: {e}") from e

    def _list_sync(self) -> list[Job]:
        try:
            paths = sorted(self._dir.glob(f"*{_SUFFIX}"))
        except OSError as e:
            raise JobStoreError(f"Cannot list {self._dir}: {e}") from e

        jobs = []
        for path in paths:
            if path.name.startswith(_TMP_PREFIX):
                continue
            try:
                jobs.append(Job.model_validate_json(path.read_text(encoding="utf-8")))
            except (OSError, ValueError) as e:
                # pydantic's ValidationError is a ValueError
                logger.warning(
                    "Skipping unreadable job record",
                    extra={"path": str(path), "error": str(e)},
                )
        return jobs
