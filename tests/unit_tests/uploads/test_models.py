import pytest

from drive_files_api.uploads.models import JobStatus, LocalFile, UploadJob


def test__local_file__from_path(tmp_path):
    path = tmp_path / "scan.pdf"
    path.write_bytes(b"%PDF-1.4")

    local_file = LocalFile.from_path(path)

    assert local_file.name == "scan.pdf"
    assert local_file.size == 8
    assert local_file.content_type == "application/pdf"
    assert local_file.read_bytes() == b"%PDF-1.4"


def test__local_file__without_content():
    with pytest.raises(ValueError):
        LocalFile(name="ghost", size=1).read_bytes()


def test__job_status__terminal_states():
    assert [status for status in JobStatus if status.is_terminal] == [JobStatus.COMPLETED, JobStatus.FAILED]


def test__empty_file_progress():
    job = UploadJob(file=LocalFile.from_bytes("empty.txt", b""))

    assert job.progress_percent == 0.0
    assert job.transition(JobStatus.IN_PROGRESS).transition(JobStatus.COMPLETED).progress_percent == 100.0
