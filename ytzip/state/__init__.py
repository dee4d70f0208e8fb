from .models import ALLOWED_TRANSITIONS, Job, JobStatus
from .job_state import State, state

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Job",
    "JobStatus",
    "State",
    "state",
]
