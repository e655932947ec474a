"""Upload job data models."""
import mimetypes
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional


class JobStatus(str, Enum):
    """Forward-only job states: PENDING -> IN_PROGRESS -> COMPLETED | FAILED."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


ALLOWED_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.IN_PROGRESS},
    JobStatus.IN_PROGRESS: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


class InvalidJobTransition(Exception):
    """Raised when a job is asked to move backwards or out of a terminal state."""

    def __init__(self, job_id: str, current: JobStatus, requested: JobStatus):
        super().__init__(f"Job {job_id} cannot move from {current.value} to {requested.value}")
        self.job_id = job_id
        self.current = current
        self.requested = requested


@dataclass(frozen=True)
class LocalFile:
    """A local file queued for upload: either in-memory bytes or a path on disk."""
    name: str
    size: int
    path: Optional[Path] = None
    data: Optional[bytes] = None
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path, content_type: Optional[str] = None) -> "LocalFile":
        path = Path(path)
        guessed = content_type or mimetypes.guess_type(path.name)[0]
        return cls(name=path.name, size=path.stat().st_size, path=path, content_type=guessed)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: Optional[str] = None) -> "LocalFile":
        return cls(name=name, size=len(data), data=data, content_type=content_type)

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ValueError(f"LocalFile {self.name!r} has neither data nor a path")
        return self.path.read_bytes()


def new_job_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class UploadJob:
    """
    One tracked upload attempt for one local file.

    Instances are immutable; the job table swaps in a new instance on every change.
    `speed_bytes_per_sec` and `eta_seconds` are presentational only.
    """
    file: LocalFile
    id: str = field(default_factory=new_job_id)
    status: JobStatus = JobStatus.PENDING
    bytes_transferred: int = 0
    speed_bytes_per_sec: float = 0.0
    eta_seconds: float = 0.0
    started_at: Optional[float] = None
    error_message: Optional[str] = None

    @property
    def total_bytes(self) -> int:
        return self.file.size

    @property
    def name(self) -> str:
        return self.file.name

    @property
    def progress_percent(self) -> float:
        if self.total_bytes <= 0:
            return 100.0 if self.status == JobStatus.COMPLETED else 0.0
        return self.bytes_transferred / self.total_bytes * 100

    def transition(self, status: JobStatus, **changes) -> "UploadJob":
        """Return a copy moved to `status`, refusing anything but a forward step."""
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidJobTransition(self.id, self.status, status)
        return replace(self, status=status, **changes)


@dataclass(frozen=True)
class UploadSummary:
    """Aggregate view over every job of a submission."""
    total: int
    pending: int
    in_progress: int
    completed: int
    failed: int
    total_bytes: int
    bytes_transferred: int
    speed_bytes_per_sec: float

    @property
    def overall_percent(self) -> float:
        """Share of jobs that completed; failed jobs never count as done."""
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100

    @property
    def settled(self) -> bool:
        return self.completed + self.failed == self.total
