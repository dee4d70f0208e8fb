"""Job data model"""
import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    pending = "pending"
    downloading = "downloading"
    creating_zip = "creating_zip"
    completed = "completed"
    failed = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.completed, JobStatus.failed)


# Staying in the current state is always allowed for non-terminal states.
ALLOWED_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.pending: frozenset({JobStatus.downloading, JobStatus.failed}),
    JobStatus.downloading: frozenset({JobStatus.creating_zip, JobStatus.failed}),
    JobStatus.creating_zip: frozenset({JobStatus.completed, JobStatus.failed}),
    JobStatus.completed: frozenset(),
    JobStatus.failed: frozenset(),
}


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Job(BaseModel):
    """One submitted request to retrieve and archive one video."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    url: str
    format: str
    quality: str
    status: JobStatus = JobStatus.pending
    progress: int = 0
    file_name: Optional[str] = None
    file_size: Optional[str] = None
    zip_path: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime.datetime = Field(default_factory=_utcnow)

    def to_public(self) -> Dict:
        return self.model_dump(mode="json", by_alias=True)
