"""Console rendering of the upload job table."""
from __future__ import annotations

from typing import Optional

from rich.console import Console, Group
from rich.live import Live
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from drive_files_api.uploads.job_table import JobTable, Snapshot
from drive_files_api.uploads.models import JobStatus, UploadJob, UploadSummary

STATUS_STYLES = {
    JobStatus.PENDING: ("Waiting", "dim"),
    JobStatus.IN_PROGRESS: ("Uploading", "cyan"),
    JobStatus.COMPLETED: ("Done", "green"),
    JobStatus.FAILED: ("Failed", "red"),
}


def _scaled(value: float, units: list[str]) -> str:
    size = float(value)
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    return f"{round(size, 1):g} {units[unit_idx]}"


def format_file_size(num_bytes: int) -> str:
    """Human readable size; empty for zero bytes."""
    if num_bytes <= 0:
        return ""
    return _scaled(num_bytes, ["Bytes", "KB", "MB", "GB"])


def format_speed(bytes_per_second: float) -> str:
    if bytes_per_second <= 0:
        return ""
    return _scaled(bytes_per_second, ["B/s", "KB/s", "MB/s", "GB/s"])


def format_eta(seconds: float) -> str:
    if seconds < 60:
        return f"{round(seconds)}s"
    if seconds < 3600:
        return f"{round(seconds / 60)}m"
    return f"{round(seconds / 3600)}h"


def render_job_row(job: UploadJob) -> tuple:
    label, style = STATUS_STYLES[job.status]
    if job.status == JobStatus.IN_PROGRESS:
        detail = f"{format_file_size(job.bytes_transferred) or '0 Bytes'} of {format_file_size(job.total_bytes)}"
        rate = format_speed(job.speed_bytes_per_sec)
        eta = format_eta(job.eta_seconds) + " left" if job.speed_bytes_per_sec > 0 else ""
    elif job.status == JobStatus.COMPLETED:
        detail, rate, eta = f"{format_file_size(job.total_bytes)} uploaded", "", ""
    elif job.status == JobStatus.FAILED:
        detail, rate, eta = job.error_message or "Upload failed", "", ""
    else:
        detail, rate, eta = format_file_size(job.total_bytes), "", ""

    return (
        Text(job.name, overflow="ellipsis"),
        Text(label, style=style),
        ProgressBar(total=100, completed=job.progress_percent, width=24),
        f"{job.progress_percent:3.0f}%",
        detail,
        rate,
        eta,
    )


def render_jobs(snapshot: Snapshot, summary: UploadSummary) -> Group:
    """Build the renderable for one snapshot of the job table."""
    table = Table(expand=False, show_edge=False, pad_edge=False)
    table.add_column("File", max_width=40, no_wrap=True)
    table.add_column("Status")
    table.add_column("Progress")
    table.add_column("%", justify="right")
    table.add_column("Transferred")
    table.add_column("Speed", justify="right")
    table.add_column("ETA", justify="right")
    for job in snapshot:
        table.add_row(*render_job_row(job))

    heading = "Upload complete" if summary.settled else "Uploading"
    overall = Text.assemble(
        (f"{heading} ({summary.completed}/{summary.total})", "bold"),
        f"  {summary.overall_percent:.0f}%",
        (f"  {summary.failed} failed" if summary.failed else "", "red"),
    )
    return Group(overall, table)


class UploadProgressView:
    """
    Live console view that redraws whenever the job table publishes a snapshot.

    Use as a context manager around a submission.
    """

    def __init__(self, table: JobTable, console: Optional[Console] = None, refresh_per_second: int = 8):
        self._table = table
        self._console = console or Console()
        self._live = Live(
            render_jobs(table.snapshot(), table.summary()),
            console=self._console,
            refresh_per_second=refresh_per_second,
            transient=False,
        )
        self._unsubscribe = None

    def _on_change(self, snapshot: Snapshot) -> None:
        self._live.update(render_jobs(snapshot, self._table.summary()))

    def __enter__(self) -> "UploadProgressView":
        self._live.start()
        self._unsubscribe = self._table.subscribe(self._on_change)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self._live.update(render_jobs(self._table.snapshot(), self._table.summary()), refresh=True)
        self._live.stop()
