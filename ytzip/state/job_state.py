"""In-memory job store"""
import logging
import threading
from typing import Any, Dict, List, Optional

from ytzip.errors import InvalidTransition

from .models import ALLOWED_TRANSITIONS, Job, JobStatus

_logger = logging.getLogger("ytzip")

_UPDATABLE_FIELDS = {"file_name", "file_size", "zip_path", "error_message"}


class State:
    """Job id -> Job map.

    Progress is written from yt-dlp worker threads while the HTTP handlers read on the
    event loop, so every access goes through one lock. Callers get copies, never the
    stored objects.
    """

    def __init__(self):
        self._jobs: Dict[int, Job] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def add_job(self, url: str, format: str, quality: str) -> Job:
        with self._lock:
            job = Job(id=self._next_id, url=url, format=format, quality=quality)
            self._next_id += 1
            self._jobs[job.id] = job
            snapshot = job.model_copy()
        _logger.info("Created job job_id=%s format=%s quality=%s url=%s", job.id, format, quality, url)
        return snapshot

    def get_job(self, job_id: int) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy() if job else None

    def update_job(
        self,
        job_id: int,
        status: Optional[JobStatus] = None,
        progress: Optional[int] = None,
        **fields: Any,
    ) -> Optional[Job]:
        """Apply a status/progress change and return the updated job.

        Raises InvalidTransition if ``status`` cannot follow the current status.
        Progress is clamped to 0-100 and never moves backwards.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown job fields: {', '.join(sorted(unknown))}")

        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                _logger.warning("Attempted to update missing job job_id=%s status=%s", job_id, status)
                return None

            if status is not None and status != job.status:
                if status not in ALLOWED_TRANSITIONS[job.status]:
                    raise InvalidTransition(
                        f"Job {job_id} cannot move from {job.status.value} to {JobStatus(status).value}"
                    )
                job.status = JobStatus(status)
            elif status is not None and job.status.is_terminal:
                raise InvalidTransition(f"Job {job_id} is already {job.status.value}")

            if progress is not None:
                job.progress = max(job.progress, min(100, max(0, int(progress))))

            for name, value in fields.items():
                setattr(job, name, value)

            snapshot = job.model_copy()

        _logger.debug("Updated job job_id=%s status=%s progress=%s", job_id, snapshot.status.value, snapshot.progress)
        return snapshot

    def list_jobs(self, status: Optional[JobStatus] = None) -> List[Job]:
        with self._lock:
            jobs = [j.model_copy() for j in self._jobs.values()]
        if status is not None:
            jobs = [j for j in jobs if j.status == status]
        return jobs

    def clear(self) -> None:
        """Drop every job and restart ids at 1."""
        with self._lock:
            self._jobs.clear()
            self._next_id = 1


state = State()
