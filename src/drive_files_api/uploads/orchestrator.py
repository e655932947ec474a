"""Bounded-concurrency upload orchestration."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

from drive_files_api.uploads.job_table import JobTable
from drive_files_api.uploads.models import LocalFile, UploadJob
from drive_files_api.uploads.transport import UploadTransport, UploadTransportError
from drive_files_api.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)

UPLOAD_CONCURRENCY_LIMIT = 3

T = TypeVar("T")
RefreshCallback = Callable[[Optional[str]], Awaitable[Any]]


def partition(items: Sequence[T], size: int) -> List[List[T]]:
    """Split `items` into consecutive batches of at most `size` elements."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [list(items[start:start + size]) for start in range(0, len(items), size)]


class UploadOrchestrator:
    """
    Uploads a list of files in fixed-size batches and tracks every file as a job.

    Uploads within a batch run concurrently; the next batch starts only once every job of
    the current one is completed or failed. Failures are recorded on their job and never
    stop other uploads. When all batches have settled the listing is refreshed once.
    """

    def __init__(
        self,
        transport: UploadTransport,
        refresh_listing: Optional[RefreshCallback] = None,
        job_table: Optional[JobTable] = None,
        concurrency_limit: int = UPLOAD_CONCURRENCY_LIMIT,
    ):
        self.transport = transport
        self.refresh_listing = refresh_listing
        self.table = job_table if job_table is not None else JobTable()
        self.concurrency_limit = concurrency_limit

    @async_log_execution_time
    async def submit(self, files: Sequence[LocalFile], parent_id: Optional[str] = None) -> JobTable:
        """
        Upload `files` into `parent_id` and return the job table once everything settled.

        Starting a submission evicts the jobs of any previous one.
        """
        jobs = self.table.reset(files)
        batches = partition(jobs, self.concurrency_limit)
        logger.info(
            f"Uploading {len(jobs)} files in {len(batches)} batches of up to {self.concurrency_limit}"
        )

        for index, batch in enumerate(batches, start=1):
            logger.debug(f"Batch {index}/{len(batches)}: {[job.name for job in batch]}")
            await asyncio.gather(*(self._run_job(job, parent_id) for job in batch))

        summary = self.table.summary()
        logger.info(f"Uploads settled: {summary.completed} completed, {summary.failed} failed")

        await self._refresh(parent_id)
        return self.table

    async def _run_job(self, job: UploadJob, parent_id: Optional[str]) -> None:
        self.table.start(job.id)

        def on_progress(bytes_sent: int, total: int) -> None:
            self.table.record_progress(job.id, bytes_sent, total)

        try:
            await self.transport.upload(job.file, parent_id, on_progress)
        except UploadTransportError as e:
            logger.error(f"Upload of {job.name} failed: {e}")
            self.table.fail(job.id, e.reason)
        except Exception:  # pylint: disable=broad-except
            logger.exception(f"Unexpected error uploading {job.name}")
            self.table.fail(job.id, UploadTransportError.reason)
        else:
            self.table.complete(job.id)

    async def _refresh(self, parent_id: Optional[str]) -> None:
        if self.refresh_listing is None:
            return
        try:
            await self.refresh_listing(parent_id)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(f"Error refreshing file listing: {str(e)}")
