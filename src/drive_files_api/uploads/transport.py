"""HTTP transport that streams multipart uploads and reports bytes sent."""
from __future__ import annotations

import logging
from typing import AsyncIterator, Callable, Optional, Protocol

import httpx

from drive_files_api.config.settings import DEFAULT_UPLOAD_CHUNK_SIZE
from drive_files_api.uploads.models import LocalFile

logger = logging.getLogger(__name__)

UPLOAD_ENDPOINT = "/upload"

ProgressCallback = Callable[[int, int], None]


class UploadTransportError(Exception):
    """An upload did not succeed; `reason` is the short text shown on the job."""

    reason = "Upload failed"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.reason)
        self.detail = detail


class UploadFailedError(UploadTransportError):
    """The server answered with a non-success status."""

    reason = "Upload failed"

    def __init__(self, status_code: int, detail: Optional[str] = None):
        super().__init__(detail or f"Server responded with HTTP {status_code}")
        self.status_code = status_code


class UploadNetworkError(UploadTransportError):
    """The request never got a response."""

    reason = "Network error"


class UploadTransport(Protocol):
    """Anything able to send one file and report cumulative bytes sent."""

    async def upload(
        self,
        local_file: LocalFile,
        parent_id: Optional[str],
        on_progress: ProgressCallback,
    ) -> dict:
        ...


class HttpUploadTransport:
    """
    Sends files to `POST /upload` with an `httpx.AsyncClient`.

    The multipart body is encoded up front so its length is known, then handed to the
    connection chunk by chunk; `on_progress(bytes_sent, total)` fires after each chunk.
    """

    def __init__(self, client: httpx.AsyncClient, chunk_size: int = DEFAULT_UPLOAD_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._client = client
        self._chunk_size = chunk_size

    def encode_body(self, local_file: LocalFile, parent_id: Optional[str]) -> tuple[bytes, str]:
        """Encode the multipart form; returns the body and its Content-Type header."""
        payload = local_file.read_bytes()
        file_part = (
            (local_file.name, payload, local_file.content_type)
            if local_file.content_type
            else (local_file.name, payload)
        )
        data = {"parentId": parent_id} if parent_id else None
        encoded = self._client.build_request("POST", UPLOAD_ENDPOINT, files={"file": file_part}, data=data)
        return encoded.read(), encoded.headers["Content-Type"]

    async def _stream(self, body: bytes, on_progress: ProgressCallback) -> AsyncIterator[bytes]:
        total = len(body)
        sent = 0
        for offset in range(0, total, self._chunk_size):
            chunk = body[offset:offset + self._chunk_size]
            yield chunk
            sent += len(chunk)
            on_progress(sent, total)

    async def upload(
        self,
        local_file: LocalFile,
        parent_id: Optional[str],
        on_progress: ProgressCallback,
    ) -> dict:
        body, content_type = self.encode_body(local_file, parent_id)
        request = self._client.build_request(
            "POST",
            UPLOAD_ENDPOINT,
            content=self._stream(body, on_progress),
            headers={"Content-Type": content_type, "Content-Length": str(len(body))},
        )

        try:
            response = await self._client.send(request)
        except httpx.TransportError as e:
            logger.warning(f"Network error uploading {local_file.name}: {str(e)}")
            raise UploadNetworkError(str(e)) from e

        if not response.is_success:
            try:
                payload = response.json()
                detail = payload.get("error") if isinstance(payload, dict) else None
            except ValueError:
                detail = response.text or None
            logger.warning(f"Upload of {local_file.name} rejected with {response.status_code}: {detail}")
            raise UploadFailedError(response.status_code, detail)

        try:
            return response.json()
        except ValueError:
            return {}
