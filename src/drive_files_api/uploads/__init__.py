"""
Client-side upload pipeline: jobs, the shared job table, the HTTP transport and the
bounded-concurrency orchestrator that ties them together.
"""
from drive_files_api.uploads.job_table import JobTable
from drive_files_api.uploads.models import (
    InvalidJobTransition,
    JobStatus,
    LocalFile,
    UploadJob,
    UploadSummary,
)
from drive_files_api.uploads.orchestrator import UPLOAD_CONCURRENCY_LIMIT, UploadOrchestrator
from drive_files_api.uploads.transport import (
    HttpUploadTransport,
    UploadFailedError,
    UploadNetworkError,
    UploadTransportError,
)

__all__ = [
    "HttpUploadTransport",
    "InvalidJobTransition",
    "JobStatus",
    "JobTable",
    "LocalFile",
    "UPLOAD_CONCURRENCY_LIMIT",
    "UploadFailedError",
    "UploadJob",
    "UploadNetworkError",
    "UploadOrchestrator",
    "UploadSummary",
    "UploadTransportError",
]
