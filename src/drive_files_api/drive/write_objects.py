"""Functions for writing files to Google Drive--the "C" in CRUD."""

import io
import logging
from typing import Optional

from googleapiclient.discovery import Resource
from googleapiclient.http import MediaIoBaseUpload

from drive_files_api.content_types import GENERIC_CONTENT_TYPE

logger = logging.getLogger(__name__)

UPLOADED_FILE_FIELDS = "id,name,webViewLink,size,createdTime,modifiedTime,mimeType"


def upload_file(
    drive_service: Resource,
    name: str,
    file_content: bytes,
    content_type: Optional[str] = None,
    parent_id: Optional[str] = None,
) -> dict:
    """
    Upload a file to Google Drive.

    :param drive_service: A Drive v3 resource.
    :param name: The file name shown in Drive.
    :param file_content: The content of the file to upload.
    :param content_type: The MIME type of the file, e.g. "image/heic".
    :param parent_id: Optional id of the destination folder.
    :return: Metadata of the created file, including `size` as an int.
    """
    content_type = content_type or GENERIC_CONTENT_TYPE
    file_metadata = {"name": name}
    if parent_id:
        file_metadata["parents"] = [parent_id]

    media = MediaIoBaseUpload(io.BytesIO(file_content), mimetype=content_type, resumable=False)
    uploaded = drive_service.files().create(
        body=file_metadata,
        media_body=media,
        fields=UPLOADED_FILE_FIELDS,
    ).execute()

    logger.info(f"Uploaded '{name}' ({len(file_content)} bytes, {content_type}) as {uploaded.get('id')}")
    return {**uploaded, "size": int(uploaded.get("size") or 0)}
