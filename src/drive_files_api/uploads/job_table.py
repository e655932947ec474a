"""Shared table of upload jobs.

Every mutation builds a new mapping with exactly one entry replaced and publishes the
resulting snapshot to subscribers. Readers only ever see immutable snapshots.
"""
import logging
import time
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from drive_files_api.uploads.models import JobStatus, LocalFile, UploadJob, UploadSummary

logger = logging.getLogger(__name__)

Snapshot = Tuple[UploadJob, ...]
Listener = Callable[[Snapshot], None]


def compute_transfer_rates(bytes_sent: int, total_bytes: int, elapsed_seconds: float) -> Tuple[float, float]:
    """
    Instantaneous speed (bytes/s) and ETA (s) for a transfer.

    Speed is 0 when no time has elapsed and ETA is 0 when speed is 0, so both values are
    always finite and non-negative.
    """
    speed = bytes_sent / elapsed_seconds if elapsed_seconds > 0 else 0.0
    remaining = max(total_bytes - bytes_sent, 0)
    eta = remaining / speed if speed > 0 else 0.0
    return max(speed, 0.0), eta


def scale_to_file(bytes_sent: int, request_total: int, file_size: int) -> int:
    """Map a position within the request body onto the file size."""
    if request_total <= 0 or file_size <= 0:
        return 0
    scaled = round(min(max(bytes_sent, 0), request_total) / request_total * file_size)
    return min(scaled, file_size)


class JobTable:
    """Copy-on-write table of `UploadJob`s keyed by job id."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._jobs: Dict[str, UploadJob] = {}
        self._listeners: List[Listener] = []
        self._clock = clock

    # --- reads ---

    def snapshot(self) -> Snapshot:
        return tuple(self._jobs.values())

    def get(self, job_id: str) -> UploadJob:
        return self._jobs[job_id]

    def __len__(self) -> int:
        return len(self._jobs)

    def summary(self) -> UploadSummary:
        jobs = self._jobs.values()
        counts = {status: 0 for status in JobStatus}
        for job in jobs:
            counts[job.status] += 1
        return UploadSummary(
            total=len(self._jobs),
            pending=counts[JobStatus.PENDING],
            in_progress=counts[JobStatus.IN_PROGRESS],
            completed=counts[JobStatus.COMPLETED],
            failed=counts[JobStatus.FAILED],
            total_bytes=sum(job.total_bytes for job in jobs),
            bytes_transferred=sum(job.bytes_transferred for job in jobs),
            speed_bytes_per_sec=sum(
                job.speed_bytes_per_sec for job in jobs if job.status == JobStatus.IN_PROGRESS
            ),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with each new snapshot; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- writes ---

    def reset(self, files: Iterable[LocalFile]) -> List[UploadJob]:
        """Evict every tracked job and start tracking one pending job per file."""
        jobs = [UploadJob(file=local_file) for local_file in files]
        table = {job.id: job for job in jobs}
        if len(table) != len(jobs):
            raise RuntimeError("Duplicate upload job id generated")
        self._publish(table)
        return jobs

    def start(self, job_id: str) -> UploadJob:
        job = self._jobs[job_id].transition(JobStatus.IN_PROGRESS, started_at=self._clock())
        return self._replace(job)

    def record_progress(self, job_id: str, bytes_sent: int, request_total: int) -> Optional[UploadJob]:
        """
        Apply one progress report from the transport.

        Reports for jobs that are not in progress are ignored; the transferred byte count
        never goes backwards.
        """
        job = self._jobs[job_id]
        if job.status != JobStatus.IN_PROGRESS:
            logger.debug(f"Ignoring progress for {job_id} in state {job.status.value}")
            return None

        transferred = max(job.bytes_transferred, scale_to_file(bytes_sent, request_total, job.total_bytes))
        now = self._clock()
        elapsed = now - job.started_at if job.started_at is not None else 0.0
        speed, eta = compute_transfer_rates(transferred, job.total_bytes, elapsed)
        return self._replace(
            replace(job, bytes_transferred=transferred, speed_bytes_per_sec=speed, eta_seconds=eta)
        )

    def complete(self, job_id: str) -> UploadJob:
        job = self._jobs[job_id]
        return self._replace(
            job.transition(JobStatus.COMPLETED, bytes_transferred=job.total_bytes, eta_seconds=0.0)
        )

    def fail(self, job_id: str, reason: str) -> UploadJob:
        job = self._jobs[job_id]
        return self._replace(
            job.transition(JobStatus.FAILED, error_message=reason, speed_bytes_per_sec=0.0, eta_seconds=0.0)
        )

    def clear_completed(self) -> int:
        """Drop completed jobs; returns how many were evicted."""
        kept = {job_id: job for job_id, job in self._jobs.items() if job.status != JobStatus.COMPLETED}
        evicted = len(self._jobs) - len(kept)
        self._publish(kept)
        return evicted

    def _replace(self, job: UploadJob) -> UploadJob:
        table = dict(self._jobs)
        table[job.id] = job
        self._publish(table)
        return job

    def _publish(self, table: Dict[str, UploadJob]) -> None:
        self._jobs = table
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Job table listener failed")
