import httpx
import pytest

from drive_files_api.uploads.models import LocalFile
from drive_files_api.uploads.transport import (
    UPLOAD_ENDPOINT,
    HttpUploadTransport,
    UploadFailedError,
    UploadNetworkError,
)

TEST_BASE_URL = "http://files-api.test"


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=TEST_BASE_URL, transport=httpx.MockTransport(handler))


async def test__upload__streams_multipart_and_reports_progress():
    received = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        received["path"] = request.url.path
        received["content_type"] = request.headers["Content-Type"]
        received["content_length"] = int(request.headers["Content-Length"])
        received["body"] = request.content
        return httpx.Response(200, json={"message": "File uploaded successfully", "file": {"id": "f1"}})

    progress = []
    local_file = LocalFile.from_bytes("photo.heic", b"x" * 1000, "image/heic")

    async with make_client(handler) as client:
        transport = HttpUploadTransport(client, chunk_size=128)
        result = await transport.upload(local_file, "folder-9", lambda sent, total: progress.append((sent, total)))

    assert result["file"]["id"] == "f1"
    assert received["path"] == UPLOAD_ENDPOINT
    assert received["content_type"].startswith("multipart/form-data; boundary=")
    assert received["content_length"] == len(received["body"])
    assert b'name="file"; filename="photo.heic"' in received["body"]
    assert b"Content-Type: image/heic" in received["body"]
    assert b'name="parentId"' in received["body"]
    assert b"folder-9" in received["body"]

    assert len(progress) > 1
    assert [sent for sent, _ in progress] == sorted(sent for sent, _ in progress)
    assert progress[-1] == (received["content_length"], received["content_length"])


async def test__upload__omits_parent_when_not_given():
    bodies = []

    async def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(200, json={})

    async with make_client(handler) as client:
        await HttpUploadTransport(client).upload(LocalFile.from_bytes("a.txt", b"abc"), None, lambda *_: None)

    assert b"parentId" not in bodies[0]


async def test__upload__server_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        await request.aread()
        return httpx.Response(500, json={"error": "Failed to upload file", "details": "quota"})

    async with make_client(handler) as client:
        with pytest.raises(UploadFailedError) as exc_info:
            await HttpUploadTransport(client).upload(LocalFile.from_bytes("a.txt", b"abc"), None, lambda *_: None)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to upload file"
    assert exc_info.value.reason == "Upload failed"


async def test__upload__non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway")

    async with make_client(handler) as client:
        with pytest.raises(UploadFailedError) as exc_info:
            await HttpUploadTransport(client).upload(LocalFile.from_bytes("a.txt", b"abc"), None, lambda *_: None)

    assert exc_info.value.detail == "Bad gateway"


async def test__upload__network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UploadNetworkError) as exc_info:
            await HttpUploadTransport(client).upload(LocalFile.from_bytes("a.txt", b"abc"), None, lambda *_: None)

    assert exc_info.value.reason == "Network error"


def test__chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        HttpUploadTransport(make_client(lambda request: httpx.Response(200)), chunk_size=0)
