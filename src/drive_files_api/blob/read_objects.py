"""Functions for reading blobs and bundling them into zip archives."""

import io
import logging
import zipfile
from dataclasses import dataclass
from typing import Dict, Iterator, List

from azure.storage.blob import ContainerClient

from drive_files_api.content_types import GENERIC_CONTENT_TYPE
from drive_files_api.errors import PartialBatchFailure
from drive_files_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

ARCHIVE_CONTENT_TYPE = "application/zip"


def blob_base_name(blob_name: str) -> str:
    """Last path segment of a blob name, falling back to the full name."""
    return blob_name.split("/")[-1] or blob_name


@dataclass
class BlobStream:
    """An opened blob download, ready to be streamed back to a caller."""
    file_name: str
    content_type: str
    chunks: Iterator[bytes]


def open_blob_stream(container_client: ContainerClient, blob_name: str) -> BlobStream:
    """
    Start downloading a single blob.

    The download is opened eagerly so a missing blob raises before any byte is sent.

    :param container_client: The container holding the blob.
    :param blob_name: Full name of the blob.
    """
    downloader = container_client.get_blob_client(blob_name).download_blob()
    content_settings = downloader.properties.content_settings
    content_type = (content_settings.content_type if content_settings else None) or GENERIC_CONTENT_TYPE
    logger.info(f"Streaming blob '{blob_name}' ({content_type})")
    return BlobStream(
        file_name=blob_base_name(blob_name) or "download",
        content_type=content_type,
        chunks=downloader.chunks(),
    )


def fetch_blob_bytes(container_client: ContainerClient, blob_name: str) -> bytes:
    """Download a whole blob into memory."""
    return container_client.get_blob_client(blob_name).download_blob().readall()


@log_execution_time
def build_zip_archive(container_client: ContainerClient, blob_names: List[str]) -> bytes:
    """
    Fetch blobs one after another and bundle them into an in-memory zip.

    Entries are keyed by the last path segment of each blob name; a later blob with the
    same segment replaces the earlier one.

    :raises PartialBatchFailure: naming the first blob that could not be fetched.
    """
    entries: Dict[str, bytes] = {}
    for blob_name in blob_names:
        try:
            entries[blob_base_name(blob_name)] = fetch_blob_bytes(container_client, blob_name)
        except Exception as e:
            logger.error(f"Failed to download {blob_name}: {str(e)}")
            raise PartialBatchFailure(blob_name, str(e)) from e

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for entry_name, content in entries.items():
            archive.writestr(entry_name, content)

    logger.info(f"Bundled {len(entries)} blobs into a {buffer.tell()} byte archive")
    return buffer.getvalue()
