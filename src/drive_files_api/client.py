"""Async HTTP client for the Drive Files API, used by the command line front end."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from drive_files_api.schemas import DriveFileEntry, FolderMetadata
from drive_files_api.uploads.job_table import JobTable
from drive_files_api.uploads.models import LocalFile
from drive_files_api.uploads.orchestrator import UploadOrchestrator
from drive_files_api.uploads.transport import HttpUploadTransport

logger = logging.getLogger(__name__)


class FilesApiClientError(Exception):
    """The API answered with an error status."""

    def __init__(self, status_code: int, error: str, details: Any = None):
        super().__init__(f"HTTP {status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.details = details


def raise_for_api_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    raise FilesApiClientError(
        response.status_code,
        payload.get("error") or response.reason_phrase,
        payload.get("details"),
    )


class FilesApiClient:
    """
    HTTP client adapter for the API.

    Use as an async context manager; an existing `httpx.AsyncClient` may be passed in
    (tests hand in one backed by `httpx.MockTransport`).
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        upload_chunk_size: Optional[int] = None,
    ):
        self._base_url = base_url
        self._owns_client = http_client is None
        self._client = http_client
        self._upload_chunk_size = upload_chunk_size
        self.last_listing: List[DriveFileEntry] = []

    async def __aenter__(self) -> "FilesApiClient":
        if self._client is None:
            # Uploads have no timeout; a hung call blocks its batch.
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=None)
        return self

    async def __aexit__(self, *args) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("FilesApiClient not initialized. Use 'async with' context.")
        return self._client

    async def list_files(self, folder_id: Optional[str] = None) -> List[DriveFileEntry]:
        params = {"folderId": folder_id} if folder_id else None
        response = await self.http.get("/list", params=params)
        raise_for_api_error(response)
        self.last_listing = [DriveFileEntry.model_validate(raw) for raw in response.json()["files"]]
        return self.last_listing

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> FolderMetadata:
        body: Dict[str, Any] = {"name": name.strip()}
        if parent_id:
            body["parentId"] = parent_id
        response = await self.http.post("/create-folder", json=body)
        raise_for_api_error(response)
        return FolderMetadata.model_validate(response.json()["folder"])

    async def delete_file(self, file_id: str) -> None:
        response = await self.http.request("DELETE", "/delete", json={"fileId": file_id})
        raise_for_api_error(response)

    async def download(
        self,
        file_names: Sequence[str],
        folder_name: Optional[str] = None,
        single_file: bool = False,
    ) -> tuple[bytes, Optional[str]]:
        """Return the downloaded bytes and the server's Content-Disposition header."""
        body: Dict[str, Any] = {"fileNames": list(file_names), "singleFile": single_file}
        if folder_name:
            body["folderName"] = folder_name
        response = await self.http.post("/download", json=body)
        raise_for_api_error(response)
        return response.content, response.headers.get("Content-Disposition")

    def orchestrator(self, job_table: Optional[JobTable] = None) -> UploadOrchestrator:
        """An orchestrator that uploads through this client and refreshes `last_listing` afterwards."""
        transport = (
            HttpUploadTransport(self.http, chunk_size=self._upload_chunk_size)
            if self._upload_chunk_size
            else HttpUploadTransport(self.http)
        )
        return UploadOrchestrator(transport, refresh_listing=self.list_files, job_table=job_table)

    async def upload_files(self, files: Sequence[LocalFile], parent_id: Optional[str] = None) -> JobTable:
        return await self.orchestrator().submit(files, parent_id)
