import io

import pytest
from rich.console import Console

from drive_files_api.uploads.job_table import JobTable
from drive_files_api.uploads.models import LocalFile
from drive_files_api.uploads.progress import (
    UploadProgressView,
    format_eta,
    format_file_size,
    format_speed,
    render_jobs,
)


@pytest.mark.parametrize(
    "num_bytes, expected",
    [
        (0, ""),
        (512, "512 Bytes"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5 MB"),
        (3 * 1024 ** 3, "3 GB"),
    ],
)
def test__format_file_size(num_bytes, expected):
    assert format_file_size(num_bytes) == expected


def test__format_speed():
    assert format_speed(0) == ""
    assert format_speed(2 * 1024 * 1024) == "2 MB/s"


@pytest.mark.parametrize("seconds, expected", [(0, "0s"), (45, "45s"), (150, "2m"), (7200, "2h")])
def test__format_eta(seconds, expected):
    assert format_eta(seconds) == expected


def record_console() -> Console:
    return Console(file=io.StringIO(), record=True, width=160, force_terminal=False)


def test__render_jobs__shows_every_state():
    table = JobTable(clock=lambda: 0.0)
    done, failed, waiting = table.reset(
        [LocalFile(name=name, size=2048) for name in ("done.pdf", "broken.mov", "waiting.txt")]
    )
    table.start(done.id)
    table.complete(done.id)
    table.start(failed.id)
    table.fail(failed.id, "Network error")

    console = record_console()
    console.print(render_jobs(table.snapshot(), table.summary()))
    output = console.export_text()

    assert "done.pdf" in output and "Done" in output
    assert "broken.mov" in output and "Network error" in output
    assert "waiting.txt" in output and "Waiting" in output
    assert "Uploading (1/3)" in output
    assert "1 failed" in output


def test__progress_view__follows_table_and_unsubscribes():
    table = JobTable(clock=lambda: 0.0)
    console = record_console()

    with UploadProgressView(table, console=console):
        (job,) = table.reset([LocalFile(name="clip.mp4", size=4096)])
        table.start(job.id)
        table.complete(job.id)

    output = console.export_text()
    assert "clip.mp4" in output
    assert "Upload complete (1/1)" in output
